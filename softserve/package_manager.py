"""
Package manager selection and environment probing.

yarn is preferred unless the user asked for npm or the yarnpkg binary is
not usable. The decision is made once, before anything is installed.
Only yarn needs to know whether we are online: it has to be told to use
its offline cache explicitly, while npm falls back on its own.
"""

from __future__ import annotations

import logging
import os
import socket
import sys
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from . import semver
from .commands import PathLike, command_output, command_works
from .config import Config
from .errors import EnvironmentCheckError

LOG = logging.getLogger(__name__)

YARN_REGISTRY_HOST = "registry.yarnpkg.com"
MIN_NPM_VERSION = "3.0.0"


def yarn_available(cwd: Optional[PathLike] = None) -> bool:
    return command_works(["yarnpkg", "--version"], cwd=cwd)


def _resolves(host: Optional[str]) -> bool:
    if not host:
        return False
    try:
        socket.getaddrinfo(host, None)
    except (socket.gaierror, UnicodeError, OSError) as exc:
        LOG.debug("DNS lookup for %s failed: %s", host, exc)
        return False
    return True


def get_proxy() -> Optional[str]:
    """
    Return the configured HTTPS proxy URL, if any.

    The environment takes precedence over npm's https-proxy setting.
    """

    for variable in ("https_proxy", "HTTPS_PROXY"):
        value = os.environ.get(variable)
        if value:
            return value

    configured = command_output(["npm", "config", "get", "https-proxy"])
    if configured and configured not in ("null", "undefined"):
        return configured
    return None


def check_if_online(use_yarn: bool) -> bool:
    """
    Decide whether the yarn registry is reachable.

    npm is assumed to be online without any lookup.
    """

    if not use_yarn:
        return True

    if _resolves(YARN_REGISTRY_HOST):
        return True

    proxy = get_proxy()
    if proxy is None:
        return False
    # Behind a proxy external names may not resolve; the proxy's own
    # name resolving is taken as a sign of connectivity.
    return _resolves(urlparse(proxy).hostname)


def check_npm_can_read_cwd(cwd: Path) -> None:
    """
    Make sure a freshly started npm process lands in cwd.

    Misconfigured shells (AutoRun entries on Windows in particular) can
    move npm elsewhere, which would install into the wrong directory.
    """

    output = command_output(["npm", "config", "list"], cwd=cwd)
    if output is None:
        return

    prefix = "; cwd = "
    line = next((line for line in output.splitlines() if line.startswith(prefix)), None)
    if line is None:
        return

    npm_cwd = line[len(prefix):]
    if Path(npm_cwd).resolve() == Path(cwd).resolve():
        return

    message = (
        "Could not start an npm process in the right directory.\n\n"
        f"The current directory is: {cwd}\n"
        f"However, a newly started npm process runs in: {npm_cwd}\n\n"
        "This is probably caused by a misconfigured system terminal shell."
    )
    if sys.platform == "win32":
        message += (
            "\nOn Windows, this can usually be fixed by running:\n\n"
            '  reg delete "HKCU\\Software\\Microsoft\\Command Processor" /v AutoRun /f\n'
            '  reg delete "HKLM\\Software\\Microsoft\\Command Processor" /v AutoRun /f\n\n'
            "Try to run the above two lines in the terminal."
        )
    raise EnvironmentCheckError(message)


def check_npm_version(cwd: Optional[PathLike] = None) -> Optional[str]:
    """Warn when npm is older than MIN_NPM_VERSION; return the detected version."""

    npm_version = command_output(["npm", "--version"], cwd=cwd)
    if npm_version is None or semver.valid(npm_version) is None:
        LOG.info("Could not determine the npm version")
        return npm_version

    if not semver.gte(npm_version, MIN_NPM_VERSION):
        print(
            f"You are using npm {npm_version}.\n\n"
            "Please update to npm 3 or higher for a better, fully supported experience.\n"
        )
    return npm_version


def probe_package_manager(config: Config) -> Config:
    """Settle use_yarn and is_online for the rest of the run."""

    if config.use_yarn and not yarn_available(cwd=config.original_directory):
        LOG.info("yarnpkg is not usable, falling back to npm")
        config.use_yarn = False

    if not config.use_yarn and config.root is not None:
        check_npm_can_read_cwd(config.root)
        check_npm_version(cwd=config.root)

    config.is_online = check_if_online(config.use_yarn)
    LOG.info("Using %s (online=%s)", "yarn" if config.use_yarn else "npm", config.is_online)
    return config
