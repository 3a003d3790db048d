import json

from softserve.info import NOT_FOUND, collect_environment_info, format_environment_info


def test_collect_environment_info_reports_missing_tools(monkeypatch, tmp_path):
    versions = {"node": "v18.19.0", "npm": "10.2.4"}
    monkeypatch.setattr(
        "softserve.info.command_output",
        lambda args, cwd=None: versions.get(args[0]),
    )
    own = tmp_path / "node_modules" / "softserve-scripts"
    own.mkdir(parents=True)
    (own / "package.json").write_text(json.dumps({"name": "softserve-scripts", "version": "1.4.0"}))

    info = collect_environment_info(tmp_path)

    assert info["Binaries"] == {"Node": "v18.19.0", "npm": "10.2.4", "Yarn": NOT_FOUND}
    assert info["npmPackages"] == {"softserve-scripts": "1.4.0"}

    text = format_environment_info(info)
    assert "Environment Info:" in text
    assert "    Yarn: Not Found" in text


def test_collect_environment_info_without_installed_package(monkeypatch, tmp_path):
    monkeypatch.setattr("softserve.info.command_output", lambda args, cwd=None: None)

    info = collect_environment_info(tmp_path)

    assert info["npmPackages"]["softserve-scripts"] == NOT_FOUND
