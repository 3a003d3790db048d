"""
Theme initialization after the generator package has been installed.

Generator packages plug in through the ThemeInitializer interface and a
small registry keyed by package name, so the pipeline never has to load
code from node_modules by path. The registered TemplateInitializer
turns the bare package.json written earlier into a working theme.
"""

from __future__ import annotations

import json
import logging
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Type

from . import semver
from .commands import command_output
from .errors import EnvironmentCheckError, InitializationError
from .naming import generate_names
from .vcs import try_git_init

LOG = logging.getLogger(__name__)

DEFAULT_BROWSERS = {
    "development": [f"last 2 {browser} versions" for browser in ("chrome", "firefox", "edge")],
    "production": [">1%", "last 4 versions", "Firefox ESR", "not ie < 11"],
}


@dataclass
class InitSummary:
    """
    What the initializer did, and what the user should run next.
    """

    theme_name: str
    root: Path
    cd_path: str
    use_yarn: bool
    readme_renamed: bool = False
    git_initialized: bool = False

    def render(self) -> str:
        command = "yarn" if self.use_yarn else "npm"
        build = f"{command} build" if self.use_yarn else f"{command} run build"
        lines = []
        if self.git_initialized:
            lines += ["", "Initialized git repository"]
        lines += [
            "",
            f"Success! Created {self.theme_name} at {self.root}",
            "Inside that directory, you can run several commands:",
            "",
            f"  {command} start",
            "    Starts the development server.",
            "",
            f"  {build}",
            "    Bundles the app into static files for production.",
            "",
            "We suggest that you begin by typing:",
            "",
            f"  cd {self.cd_path}",
            f"  {command} start",
        ]
        if self.readme_renamed:
            lines += ["", "You had a `README.md` file, we renamed it to `README.old.md`"]
        lines += ["", "Happy Hacking!"]
        return "\n".join(lines)


class ThemeInitializer(ABC):
    """
    Interface every generator package's initializer implements.
    """

    package_name: str = ""

    @abstractmethod
    def initialize(
        self,
        root: Path,
        theme_name: str,
        verbose: bool,
        original_directory: Optional[Path],
    ) -> InitSummary:
        """
        Scaffold the theme inside root and describe the result.

        Implementations raise InitializationError when the theme cannot
        be set up; the pipeline then rolls back.
        """


_REGISTRY: Dict[str, Type[ThemeInitializer]] = {}


def register_initializer(package_name: str) -> Callable[[Type[ThemeInitializer]], Type[ThemeInitializer]]:
    def decorator(cls: Type[ThemeInitializer]) -> Type[ThemeInitializer]:
        cls.package_name = package_name
        _REGISTRY[package_name] = cls
        return cls

    return decorator


def resolve_initializer(package_name: str) -> ThemeInitializer:
    try:
        return _REGISTRY[package_name]()
    except KeyError:
        raise InitializationError(
            f"No theme initializer is registered for {package_name}"
        ) from None


def _read_package_json(path: Path) -> dict:
    try:
        return json.loads(path.read_text())
    except (OSError, ValueError) as exc:
        raise InitializationError(f"Could not read {path}: {exc}") from exc


def _write_package_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data, indent=2) + "\n")


def check_node_version(root: Path, package_name: str) -> None:
    """
    Refuse to continue when node does not satisfy the package's engines.node.
    """

    package_json = _read_package_json(root / "node_modules" / package_name / "package.json")
    required = (package_json.get("engines") or {}).get("node")
    if not required:
        return

    node_version = command_output(["node", "--version"], cwd=root)
    if node_version is None:
        LOG.warning("Could not determine the node version; skipping engines check")
        return

    if not semver.satisfies(node_version, required):
        raise EnvironmentCheckError(
            f"You are running Node {node_version}.\n"
            f"Softserve requires Node {required} or higher. \n"
            "Please update your version of Node."
        )


def check_for_script_dep(root: Path, package_name: str) -> None:
    """The install step must have recorded the generator in package.json."""

    package_json = _read_package_json(root / "package.json")
    dependencies = package_json.get("dependencies")
    if dependencies is None:
        raise InitializationError("Missing dependencies in package.json")
    if package_name not in dependencies:
        raise InitializationError(f"Unable to find {package_name} in package.json")


def substitute_names(path: Path, names: Dict[str, str]) -> bool:
    """
    Replace {{name.<variant>}} tokens in a text file.

    Binary files are left alone. Returns True if the file changed.
    """

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return False

    updated = content
    for variant, value in names.items():
        updated = updated.replace(f"{{{{name.{variant}}}}}", value)
    if updated == content:
        return False
    path.write_text(updated, encoding="utf-8")
    return True


def install_gitignore(root: Path) -> None:
    """
    Rename the template's gitignore to .gitignore.

    npm renames .gitignore files to .npmignore on publish, so templates
    ship it without the dot. An existing .gitignore is appended to.
    """

    source = root / "gitignore"
    if not source.exists():
        return
    target = root / ".gitignore"
    if target.exists():
        with target.open("a", encoding="utf-8") as handle:
            handle.write(source.read_text(encoding="utf-8"))
        source.unlink()
    else:
        source.rename(target)


@register_initializer("softserve-scripts")
class TemplateInitializer(ThemeInitializer):
    """
    Copies the package's template/ tree into the theme and wires scripts.
    """

    def initialize(
        self,
        root: Path,
        theme_name: str,
        verbose: bool,
        original_directory: Optional[Path],
    ) -> InitSummary:
        own_path = root / "node_modules" / self.package_name
        use_yarn = (root / "yarn.lock").exists()

        package_path = root / "package.json"
        theme_package = _read_package_json(package_path)
        theme_package.setdefault("dependencies", {})
        theme_package["scripts"] = {
            "start": f"{self.package_name} start",
            "build": f"{self.package_name} build",
        }
        theme_package["browsersList"] = DEFAULT_BROWSERS
        _write_package_json(package_path, theme_package)

        template_path = own_path / "template"
        if not template_path.is_dir():
            raise InitializationError(f"Could not locate supplied template: {template_path}")

        readme_renamed = (root / "README.md").exists()
        if readme_renamed:
            (root / "README.md").rename(root / "README.old.md")

        copied = self._copy_template(template_path, root)
        names = generate_names(theme_name)
        changed = [path for path in copied if substitute_names(path, names)]
        LOG.info("Copied %d template files (%d with name substitutions)", len(copied), len(changed))
        if verbose:
            for path in copied:
                LOG.debug("  %s", path.relative_to(root))

        install_gitignore(root)
        git_initialized = try_git_init(root)

        if original_directory is not None and original_directory / theme_name == root:
            cd_path = theme_name
        else:
            cd_path = str(root)

        return InitSummary(
            theme_name=theme_name,
            root=root,
            cd_path=cd_path,
            use_yarn=use_yarn,
            readme_renamed=readme_renamed,
            git_initialized=git_initialized,
        )

    @staticmethod
    def _copy_template(template_path: Path, root: Path) -> List[Path]:
        shutil.copytree(template_path, root, dirs_exist_ok=True)
        return [
            root / source.relative_to(template_path)
            for source in sorted(template_path.rglob("*"))
            if source.is_file()
        ]
