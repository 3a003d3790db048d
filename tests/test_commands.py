import subprocess

from softserve.commands import command_output, command_works, run_command
from softserve.errors import CommandError


def test_run_command_includes_stderr_details_on_failure(monkeypatch):
    def fake_run(*args, **kwargs):
        return subprocess.CompletedProcess(
            args=["git", "status"],
            returncode=128,
            stdout="",
            stderr="fatal: not a git repository",
        )

    monkeypatch.setattr("softserve.commands.subprocess.run", fake_run)

    try:
        run_command(["git", "status"])
    except CommandError as exc:
        message = str(exc)
        assert exc.command == "git status"
        assert exc.returncode == 128
        assert "fatal: not a git repository" in message
    else:
        raise AssertionError("expected CommandError to be raised")


def test_command_works_is_false_for_missing_binaries(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr("softserve.commands.subprocess.run", fake_run)

    assert command_works(["yarnpkg", "--version"]) is False
    assert command_output(["yarnpkg", "--version"]) is None


def test_command_output_strips_stdout_and_passes_cwd(monkeypatch, tmp_path):
    seen = {}

    def fake_run(cmd, **kwargs):
        seen.update(kwargs)
        return subprocess.CompletedProcess(args=cmd, returncode=0, stdout="1.22.19\n", stderr="")

    monkeypatch.setattr("softserve.commands.subprocess.run", fake_run)

    assert command_output(["yarnpkg", "--version"], cwd=tmp_path) == "1.22.19"
    assert seen["cwd"] == str(tmp_path)
    assert seen["capture_output"] is True
