"""Prompt theme asset — download once, keep forever."""

from __future__ import annotations

from pathlib import Path

from shellstrap.core.config.paths import expand
from shellstrap.core.models.config import NetworkConfig, ThemeConfig
from shellstrap.core.services.network import download_text


def theme_path(cfg: ThemeConfig) -> Path:
    return expand(cfg.dest_dir) / f"{cfg.name}.omp.json"


def ensure_theme(cfg: ThemeConfig, network: NetworkConfig) -> dict:
    """Make sure the theme file exists locally.

    Returns::

        {"ok": True, "status": "present" | "downloaded", "path": "..."}
        or
        {"ok": False, "status": "failed", "error": "..."}
    """
    dest = theme_path(cfg)
    if dest.is_file():
        return {"ok": True, "status": "present", "path": str(dest)}

    url = cfg.url.format(name=cfg.name)
    result = download_text(url, dest, timeout=network.download_timeout)
    if not result["ok"]:
        return {"ok": False, "status": "failed", "error": result["error"], "url": url}
    return {"ok": True, "status": "downloaded", "path": str(dest)}
