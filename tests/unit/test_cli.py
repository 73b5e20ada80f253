"""
Unit tests for the command-line entry point.
"""

import pytest

from webworker.__main__ import build_parser, config_from_args, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("HOST", "PORT", "ROOT", "TIMEOUT", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"WEBWORKER_{name}", raising=False)


class TestConfigFromArgs:
    """Tests for translating CLI flags into ServerConfig."""

    def test_defaults(self):
        config = config_from_args(build_parser().parse_args([]))

        assert config.port == 8080
        assert config.root_dir == "."
        assert config.jpg_as_png is False
        assert config.confine_to_root is True

    def test_flags(self, tmp_path):
        args = build_parser().parse_args([
            "--host", "0.0.0.0",
            "-p", "3000",
            "--root", str(tmp_path),
            "--timeout", "2.5",
            "--log-level", "DEBUG",
            "--log-format", "json",
            "--jpg-as-png",
            "--no-confine",
        ])
        config = config_from_args(args)

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.root_dir == str(tmp_path)
        assert config.request_timeout == 2.5
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.jpg_as_png is True
        assert config.confine_to_root is False

    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("WEBWORKER_PORT", "9000")

        assert config_from_args(build_parser().parse_args([])).port == 9000
        assert config_from_args(build_parser().parse_args(["-p", "9001"])).port == 9001


class TestMain:
    """Tests for main()."""

    def test_invalid_root_exits_with_error(self, tmp_path, capsys):
        code = main(["--root", str(tmp_path / "missing")])

        assert code == 2
        assert "root_dir" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "webworker" in capsys.readouterr().out
