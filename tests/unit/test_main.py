"""Unit tests for the command line entry point."""

import json
from unittest.mock import patch

import pytest

from broadcast_notifier.__main__ import build_parser, cli_overrides, main
from broadcast_notifier.errors import DeliveryError


@pytest.fixture
def token_file(tmp_path):
    path = tmp_path / "token.json"
    path.write_text(json.dumps({"access_token": "t"}))
    return path


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("broadcast_notifier.__main__.configure_logging"):
        yield


class TestCliOverrides:
    """Test argument to config translation."""

    def test_only_given_flags_override(self):
        args = build_parser().parse_args(["--discord-webhook", "https://x.example/h", "--dry-run"])

        assert cli_overrides(args) == {
            "notifications": {"webhook_url": "https://x.example/h", "dry_run": True},
        }

    def test_no_flags(self):
        assert cli_overrides(build_parser().parse_args([])) == {}


class TestMain:
    """Test main()."""

    def test_invalid_configuration_exits_2(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DISCORD_WEBHOOK", raising=False)
        assert main(["--config-dir", str(tmp_path)]) == 2

    def test_missing_token_exits_2(self, tmp_path):
        code = main([
            "--config-dir", str(tmp_path),
            "--dry-run",
            "--token-path", str(tmp_path / "absent.json"),
        ])
        assert code == 2

    def test_once_runs_single_cycle(self, tmp_path, token_file):
        with patch("broadcast_notifier.__main__.PollingLoop") as loop_cls:
            code = main([
                "--config-dir", str(tmp_path),
                "--dry-run",
                "--token-path", str(token_file),
                "--persist-file-path", str(tmp_path / "data.json"),
                "--once",
            ])

        loop = loop_cls.from_config.return_value
        assert code == 0
        loop.load_state.assert_called_once_with()
        loop.run_cycle.assert_called_once_with()
        loop.run_forever.assert_not_called()

    def test_fatal_error_exits_1(self, tmp_path, token_file):
        with patch("broadcast_notifier.__main__.PollingLoop") as loop_cls:
            loop_cls.from_config.return_value.run_forever.side_effect = DeliveryError("down")
            code = main([
                "--config-dir", str(tmp_path),
                "--dry-run",
                "--token-path", str(token_file),
            ])

        assert code == 1

    @pytest.mark.parametrize("text", ["polling: [unclosed\n", "polling: 5\n"])
    def test_unusable_config_file_exits_2(self, tmp_path, token_file, text):
        (tmp_path / "notifier.yaml").write_text(text)

        code = main([
            "--config-dir", str(tmp_path),
            "--dry-run",
            "--token-path", str(token_file),
        ])

        assert code == 2
