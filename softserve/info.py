"""
Environment report printed by `softserve --info`.

Meant to be pasted into bug reports, so every probe degrades to
"Not Found" instead of failing.
"""

from __future__ import annotations

import json
import platform
from pathlib import Path
from typing import Dict, Optional

from .commands import command_output
from .install import GENERATOR_PACKAGE

NOT_FOUND = "Not Found"


def _tool_version(*args: str, cwd: Optional[Path] = None) -> str:
    return command_output(list(args), cwd=cwd) or NOT_FOUND


def installed_package_version(cwd: Path, package_name: str) -> str:
    package_json = cwd / "node_modules" / package_name / "package.json"
    try:
        return json.loads(package_json.read_text()).get("version") or NOT_FOUND
    except (OSError, ValueError):
        return NOT_FOUND


def collect_environment_info(cwd: Path) -> Dict[str, Dict[str, str]]:
    return {
        "System": {
            "OS": f"{platform.system()} {platform.release()}",
            "Python": platform.python_version(),
        },
        "Binaries": {
            "Node": _tool_version("node", "--version", cwd=cwd),
            "npm": _tool_version("npm", "--version", cwd=cwd),
            "Yarn": _tool_version("yarnpkg", "--version", cwd=cwd),
        },
        "npmPackages": {
            GENERATOR_PACKAGE: installed_package_version(cwd, GENERATOR_PACKAGE),
        },
    }


def format_environment_info(info: Dict[str, Dict[str, str]]) -> str:
    lines = ["", "Environment Info:"]
    for section, values in info.items():
        lines.append(f"  {section}:")
        for key, value in values.items():
            lines.append(f"    {key}: {value}")
    return "\n".join(lines)


def print_environment_info(cwd: Optional[Path] = None) -> None:
    print(format_environment_info(collect_environment_info(cwd or Path.cwd())))
