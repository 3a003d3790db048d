import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

pytestmark = pytest.mark.skipif(os.name == "nt", reason="fake npm is a POSIX shell script")


FAKE_NPM = """import json
import os
import sys
from pathlib import Path

args = sys.argv[1:]
if args[:1] == ["--version"]:
    print("10.2.4")
    sys.exit(0)
if args[:1] == ["config"]:
    sys.exit(0)
if args[:1] != ["install"]:
    sys.exit(1)
if os.environ.get("FAKE_NPM_FAIL"):
    Path("npm-debug.log").write_text("install failed")
    sys.exit(2)

cwd = Path.cwd()
own = cwd / "node_modules" / "softserve-scripts"
template = own / "template"
template.mkdir(parents=True)
(own / "package.json").write_text(json.dumps({"name": "softserve-scripts", "version": "1.0.0"}))
(template / "gitignore").write_text("node_modules\\n")
(template / "style.css").write_text("Theme Name: {{name.title}}\\n")

package = json.loads((cwd / "package.json").read_text())
package["dependencies"] = {"softserve-scripts": "1.0.0"}
(cwd / "package.json").write_text(json.dumps(package, indent=2))
"""


def _run_softserve(workdir: Path, fake_bin: Path, *args, fail: bool = False):
    project_root = Path(__file__).resolve().parents[1]
    env = {
        "PATH": str(fake_bin),
        "PYTHONPATH": str(project_root),
        "HOME": str(workdir),
    }
    if fail:
        env["FAKE_NPM_FAIL"] = "1"
    return subprocess.run(
        [sys.executable, "-m", "softserve.cli", *args],
        cwd=str(workdir),
        env=env,
        text=True,
        capture_output=True,
    )


@pytest.fixture
def fake_bin(tmp_path):
    """
    A PATH holding only a fake npm: yarnpkg, node and git are missing, so
    the pipeline has to fall back to npm and skip the optional steps.
    """

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = tmp_path / "fake_npm.py"
    script.write_text(FAKE_NPM)
    npm = bin_dir / "npm"
    npm.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n')
    npm.chmod(0o755)
    return bin_dir


def test_cli_creates_theme_with_npm(tmp_path, fake_bin):
    workdir = tmp_path / "work"
    workdir.mkdir()

    completed = _run_softserve(workdir, fake_bin, "my-theme")

    assert completed.returncode == 0, completed.stdout + completed.stderr
    root = workdir / "my-theme"
    package = json.loads((root / "package.json").read_text())
    assert package["name"] == "my-theme"
    assert package["scripts"]["build"] == "softserve-scripts build"
    assert (root / "style.css").read_text() == "Theme Name: My Theme\n"
    assert (root / ".gitignore").exists()
    assert not (root / ".git").exists()
    assert "Success! Created my-theme" in completed.stdout
    assert "  npm run build" in completed.stdout


def test_cli_rolls_back_when_install_fails(tmp_path, fake_bin):
    workdir = tmp_path / "work"
    workdir.mkdir()

    completed = _run_softserve(workdir, fake_bin, "my-theme", fail=True)

    assert completed.returncode == 1
    assert "Aborting installation." in completed.stdout
    assert "npm install --save --save-exact --loglevel error softserve-scripts has failed." in completed.stdout
    assert "Deleting generated file... npm-debug.log" in completed.stdout
    assert list(workdir.iterdir()) == []
