from pathlib import Path

from softserve import scripts


def test_build_webpack_command_selects_mode_and_config(tmp_path):
    config_dir = tmp_path / "node_modules" / "softserve-scripts" / "config"

    assert scripts.build_webpack_command("build", tmp_path) == [
        "webpack",
        "--mode",
        "production",
        "--config",
        str(config_dir / "webpack.config.prod"),
    ]
    assert scripts.build_webpack_command("start", tmp_path) == [
        "webpack",
        "--mode",
        "development",
        "--watch",
        "--config",
        str(config_dir / "webpack.config.dev"),
    ]


def test_build_webpack_command_prefers_local_webpack(tmp_path):
    local = tmp_path / "node_modules" / ".bin" / "webpack"
    local.parent.mkdir(parents=True)
    local.write_text("")

    assert scripts.build_webpack_command("build", tmp_path)[0] == str(local)


def test_select_script_finds_known_script_anywhere():
    assert scripts.select_script(["--watch", "start"]) == "start"
    assert scripts.select_script(["eject"]) == "eject"
    assert scripts.select_script([]) is None


def test_main_runs_webpack_in_theme_directory(monkeypatch, tmp_path):
    calls = []
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "softserve.scripts.run_inherited",
        lambda args, cwd=None: calls.append((args, cwd)),
    )

    assert scripts.main(["build"]) == 0

    (args, cwd), = calls
    assert args[1:3] == ["--mode", "production"]
    assert Path(cwd) == tmp_path.resolve()


def test_main_rejects_unknown_script(monkeypatch, capsys):
    def fail(args, cwd=None):
        raise AssertionError("webpack must not run")

    monkeypatch.setattr("softserve.scripts.run_inherited", fail)

    assert scripts.main(["eject"]) == 1
    out = capsys.readouterr().out
    assert 'Unknown script "eject".' in out
    assert "Perhaps you need to update softserve-scripts?" in out


def test_main_without_script_asks_for_one(monkeypatch, capsys):
    def fail(args, cwd=None):
        raise AssertionError("webpack must not run")

    monkeypatch.setattr("softserve.scripts.run_inherited", fail)

    assert scripts.main([]) == 1
    out = capsys.readouterr().out
    assert "Please specify a script: build or start." in out
    assert "None" not in out
