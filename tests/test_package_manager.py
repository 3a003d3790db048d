import socket
from pathlib import Path

from softserve.config import Config
from softserve.errors import EnvironmentCheckError
from softserve.package_manager import (
    check_if_online,
    check_npm_can_read_cwd,
    check_npm_version,
    get_proxy,
    probe_package_manager,
)


def _no_dns(*args, **kwargs):
    raise AssertionError("npm installs must not probe the network")


def test_probe_falls_back_to_npm_when_yarn_is_unusable(monkeypatch, tmp_path):
    calls = []

    def fake_command_works(args, cwd=None):
        calls.append(list(args))
        return False

    monkeypatch.setattr("softserve.package_manager.command_works", fake_command_works)
    monkeypatch.setattr("softserve.package_manager.command_output", lambda args, cwd=None: None)
    monkeypatch.setattr("softserve.package_manager.socket.getaddrinfo", _no_dns)

    config = Config(theme_name="my-theme", original_directory=tmp_path, use_yarn=True)
    probe_package_manager(config)

    assert calls == [["yarnpkg", "--version"]]
    assert config.use_yarn is False
    assert config.is_online is True


def test_probe_never_tries_yarn_when_npm_was_requested(monkeypatch, tmp_path):
    def fake_command_works(args, cwd=None):
        raise AssertionError(f"unexpected probe: {args}")

    monkeypatch.setattr("softserve.package_manager.command_works", fake_command_works)
    monkeypatch.setattr("softserve.package_manager.command_output", lambda args, cwd=None: None)
    monkeypatch.setattr("softserve.package_manager.socket.getaddrinfo", _no_dns)

    config = Config(
        theme_name="my-theme",
        original_directory=tmp_path,
        root=tmp_path / "my-theme",
        use_yarn=False,
        is_online=False,
    )
    probe_package_manager(config)

    assert config.use_yarn is False
    assert config.is_online is True


def test_probe_keeps_yarn_and_checks_registry(monkeypatch, tmp_path):
    looked_up = []

    def fake_getaddrinfo(host, port):
        looked_up.append(host)
        raise socket.gaierror("offline")

    monkeypatch.setattr("softserve.package_manager.command_works", lambda args, cwd=None: True)
    monkeypatch.setattr("softserve.package_manager.socket.getaddrinfo", fake_getaddrinfo)
    monkeypatch.setattr("softserve.package_manager.get_proxy", lambda: None)

    config = Config(theme_name="my-theme", original_directory=tmp_path, use_yarn=True)
    probe_package_manager(config)

    assert config.use_yarn is True
    assert config.is_online is False
    assert looked_up == ["registry.yarnpkg.com"]


def test_check_if_online_retries_against_proxy_host(monkeypatch):
    looked_up = []

    def fake_getaddrinfo(host, port):
        looked_up.append(host)
        if host == "registry.yarnpkg.com":
            raise socket.gaierror("no external dns")
        return [("proxy",)]

    monkeypatch.setattr("softserve.package_manager.socket.getaddrinfo", fake_getaddrinfo)
    monkeypatch.setenv("https_proxy", "http://proxy.internal:3128")

    assert check_if_online(True) is True
    assert looked_up == ["registry.yarnpkg.com", "proxy.internal"]


def test_check_if_online_is_false_when_proxy_does_not_resolve(monkeypatch):
    def fake_getaddrinfo(host, port):
        raise socket.gaierror("nothing resolves")

    monkeypatch.setattr("softserve.package_manager.socket.getaddrinfo", fake_getaddrinfo)
    monkeypatch.setenv("https_proxy", "http://proxy.internal:3128")

    assert check_if_online(True) is False


def test_get_proxy_falls_back_to_npm_config(monkeypatch):
    monkeypatch.delenv("https_proxy", raising=False)
    monkeypatch.delenv("HTTPS_PROXY", raising=False)

    monkeypatch.setattr(
        "softserve.package_manager.command_output",
        lambda args, cwd=None: "http://npm-proxy:8080",
    )
    assert get_proxy() == "http://npm-proxy:8080"

    monkeypatch.setattr("softserve.package_manager.command_output", lambda args, cwd=None: "null")
    assert get_proxy() is None


def test_check_npm_can_read_cwd_detects_redirected_npm(monkeypatch, tmp_path):
    output = "; cli configs\n; cwd = /somewhere/else\n; HOME = /home/user\n"
    monkeypatch.setattr("softserve.package_manager.command_output", lambda args, cwd=None: output)

    try:
        check_npm_can_read_cwd(tmp_path)
    except EnvironmentCheckError as exc:
        message = str(exc)
        assert f"The current directory is: {tmp_path}" in message
        assert "However, a newly started npm process runs in: /somewhere/else" in message
    else:
        raise AssertionError("expected EnvironmentCheckError to be raised")


def test_check_npm_can_read_cwd_accepts_matching_directory(monkeypatch, tmp_path):
    output = f"; cwd = {tmp_path}\n"
    monkeypatch.setattr("softserve.package_manager.command_output", lambda args, cwd=None: output)
    check_npm_can_read_cwd(tmp_path)

    # No cwd line at all is tolerated.
    monkeypatch.setattr("softserve.package_manager.command_output", lambda args, cwd=None: "")
    check_npm_can_read_cwd(Path(tmp_path))


def test_check_npm_version_warns_on_old_npm(monkeypatch, capsys):
    monkeypatch.setattr("softserve.package_manager.command_output", lambda args, cwd=None: "2.15.12")

    assert check_npm_version() == "2.15.12"
    assert "You are using npm 2.15.12" in capsys.readouterr().out

    monkeypatch.setattr("softserve.package_manager.command_output", lambda args, cwd=None: "10.2.4")
    check_npm_version()
    assert capsys.readouterr().out == ""
