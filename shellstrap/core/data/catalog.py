"""
Default tool catalog — the fixed provisioning sequence.

Pure data, no logic beyond converting recipes to descriptors. Order
matters: later tools depend on earlier ones (node needs nvm, pnpm needs
node, the font installer needs oh-my-posh, modules need pwsh).
"""

from __future__ import annotations

from shellstrap.core.models.tool import ToolDescriptor

_PWSH = ("pwsh", "-NoLogo", "-NoProfile", "-NonInteractive", "-Command")


def _install_module(name: str, *extra: str) -> tuple[str, ...]:
    script = f"Install-Module -Name {name} -Repository PSGallery -Scope CurrentUser -Force"
    if extra:
        script += " " + " ".join(extra)
    return _PWSH + (script,)


TOOL_RECIPES: dict[str, dict] = {

    # ── Version control ─────────────────────────────────────────

    "git": {
        "label": "Git",
        "probe": {
            "commands": ["git"],
            "paths": [
                "%ProgramFiles%/Git/cmd/git.exe",
                "~/scoop/apps/git/current/cmd/git.exe",
            ],
        },
        "install": {"packages": {"scoop": "git", "winget": "Git.Git"}},
    },

    # ── Shell runtime ───────────────────────────────────────────

    "pwsh": {
        "label": "PowerShell 7",
        "probe": {
            "commands": ["pwsh"],
            "paths": [
                "%ProgramFiles%/PowerShell/7/pwsh.exe",
                "~/scoop/apps/pwsh/current/pwsh.exe",
            ],
        },
        "install": {"packages": {"scoop": "pwsh", "winget": "Microsoft.PowerShell"}},
    },

    # ── Node toolchain ──────────────────────────────────────────

    "nvm": {
        "label": "nvm-windows",
        "probe": {
            "commands": ["nvm"],
            "paths": [
                "%NVM_HOME%/nvm.exe",
                "%APPDATA%/nvm/nvm.exe",
                "~/scoop/apps/nvm/current/nvm.exe",
            ],
        },
        "install": {"packages": {"scoop": "nvm", "winget": "CoreyButler.NVMforWindows"}},
    },
    "node": {
        "label": "Node.js LTS",
        "probe": {
            "commands": ["node"],
            "paths": [
                "%NVM_SYMLINK%/node.exe",
                "%ProgramFiles%/nodejs/node.exe",
            ],
        },
        "install": {
            "commands": [
                ["nvm", "install", "lts"],
                ["nvm", "use", "lts"],
            ],
        },
    },
    "pnpm": {
        "label": "pnpm",
        "probe": {
            "commands": ["pnpm"],
            "paths": ["%APPDATA%/npm/pnpm.cmd"],
        },
        "install": {"commands": [["npm", "install", "--global", "pnpm"]]},
    },

    # ── Prompt ──────────────────────────────────────────────────

    "oh-my-posh": {
        "label": "Oh My Posh",
        "probe": {
            "commands": ["oh-my-posh"],
            "paths": [
                "%LOCALAPPDATA%/Programs/oh-my-posh/bin/oh-my-posh.exe",
                "~/scoop/apps/oh-my-posh/current/oh-my-posh.exe",
            ],
        },
        "install": {
            "packages": {"scoop": "oh-my-posh", "winget": "JanDeDobbeleer.OhMyPosh"},
        },
    },
    "nerd-font": {
        "label": "Meslo Nerd Font",
        "probe": {"kind": "font", "font_glob": "MesloLG*NerdFont*"},
        "install": {"commands": [["oh-my-posh", "font", "install", "meslo"]]},
    },

    # ── Shell modules ───────────────────────────────────────────

    "terminal-icons": {
        "label": "Terminal-Icons",
        "probe": {"kind": "module", "module": "Terminal-Icons"},
        "install": {"commands": [_install_module("Terminal-Icons")]},
    },
    "psreadline": {
        "label": "PSReadLine",
        "probe": {"kind": "module", "module": "PSReadLine"},
        "install": {"commands": [_install_module("PSReadLine", "-SkipPublisherCheck")]},
    },

    # ── Auxiliary ───────────────────────────────────────────────

    "zoxide": {
        "label": "zoxide",
        "probe": {
            "commands": ["zoxide"],
            "paths": ["~/scoop/apps/zoxide/current/zoxide.exe"],
        },
        "install": {"packages": {"scoop": "zoxide", "winget": "ajeetdsouza.zoxide"}},
    },
}


def default_catalog() -> list[ToolDescriptor]:
    """Return the catalog as descriptors, in provisioning order."""
    return [
        ToolDescriptor.model_validate({"name": name, **recipe})
        for name, recipe in TOOL_RECIPES.items()
    ]


def resolve_tools(
    overrides: list[ToolDescriptor] | None = None,
    skip: list[str] | None = None,
) -> list[ToolDescriptor]:
    """Apply config overrides to the default catalog.

    An override with a catalog name replaces that entry in place; unknown
    names are appended after the catalog. Names in ``skip`` are dropped.
    """
    tools = default_catalog()
    index = {tool.name: i for i, tool in enumerate(tools)}

    for override in overrides or []:
        if override.name in index:
            tools[index[override.name]] = override
        else:
            index[override.name] = len(tools)
            tools.append(override)

    skipped = set(skip or [])
    return [tool for tool in tools if tool.name not in skipped]
