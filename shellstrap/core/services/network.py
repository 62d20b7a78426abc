"""
Network helpers — best-effort HTTPS GETs.

Used for the package manager bootstrap script, the prompt theme asset and
the public IP lookup. Every call has a short fixed timeout and reports
failure in the returned dict; nothing here raises.
"""

from __future__ import annotations

import ipaddress
import logging
import time
import urllib.request
from pathlib import Path

from shellstrap import __version__
from shellstrap.core.persistence.files import atomic_write_text

logger = logging.getLogger(__name__)

_USER_AGENT = f"shellstrap/{__version__}"


def http_get(url: str, timeout: int = 10) -> bytes:
    """GET ``url`` and return the body. Raises on any failure."""
    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return resp.read()


def download_text(url: str, dest: Path, timeout: int = 10) -> dict:
    """Download a text asset to ``dest`` (atomic write).

    Returns::

        {"ok": True, "path": "...", "bytes": 1234}
        or
        {"ok": False, "url": "...", "error": "timed out"}
    """
    start = time.monotonic()
    try:
        body = http_get(url, timeout=timeout).decode("utf-8")
        atomic_write_text(dest, body)
    except Exception as exc:
        logger.warning("Download failed: %s — %s", url, exc)
        return {"ok": False, "url": url, "error": str(exc)[:200]}

    elapsed = int((time.monotonic() - start) * 1000)
    logger.info("Downloaded %s → %s (%dms)", url, dest, elapsed)
    return {"ok": True, "path": str(dest), "bytes": len(body), "elapsed_ms": elapsed}


def fetch_public_ip(endpoints: list[str], timeout: int = 5) -> dict:
    """Ask each endpoint in turn for our public IP; first valid answer wins.

    Returns::

        {"ok": True, "ip": "203.0.113.7", "endpoint": "https://..."}
        or
        {"ok": False, "errors": {"https://...": "timed out", ...}}
    """
    errors: dict[str, str] = {}
    for url in endpoints:
        try:
            text = http_get(url, timeout=timeout).decode("utf-8").strip()
            ip = str(ipaddress.ip_address(text))
        except Exception as exc:
            logger.debug("IP lookup via %s failed: %s", url, exc)
            errors[url] = str(exc)[:200]
            continue
        return {"ok": True, "ip": ip, "endpoint": url}

    return {"ok": False, "errors": errors}
