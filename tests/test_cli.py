"""Tests for the command line and run loop."""

import os
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from docker.errors import DockerException

from docker_reaper.cli import apply_args, build_parser, main, run_loop
from docker_reaper.models import Filter
from docker_reaper.utils.config import ReaperConfig


def parse(*argv):
    return build_parser().parse_args(list(argv))


class TestBuildParser:
    """Tests for argument parsing."""

    def test_containers_options(self):
        args = parse(
            "--once",
            "--dry-run",
            "containers",
            "--min-age",
            "1h",
            "--max-age",
            "1h30m",
            "-f",
            "label=ci",
            "--filter",
            "label=color=orange",
            "--reap-networks",
        )

        assert args.command == "containers"
        assert args.once is True
        assert args.dry_run is True
        assert args.min_age == timedelta(hours=1)
        assert args.max_age == timedelta(hours=1, minutes=30)
        assert args.filters == [Filter("label", "ci"), Filter("label", "color=orange")]
        assert args.reap_networks is True

    def test_global_options_after_subcommand(self):
        args = parse("volumes", "-d", "--every", "5m", "--log-level", "debug")

        assert args.dry_run is True
        assert args.every == timedelta(minutes=5)
        assert args.log_level == "DEBUG"

    def test_unset_globals_absent(self):
        args = parse("networks")

        assert "every" not in args
        assert "once" not in args
        assert args.filters == []
        assert args.min_age is None

    @pytest.mark.parametrize(
        "argv",
        [
            ["volumes", "--min-age", "1d"],
            ["volumes", "--max-age", "-5m"],
            ["volumes", "--min-age", "99999999999h"],
            ["--every", "0s", "volumes"],
            ["volumes", "-f", "label"],
            ["volumes", "-f", "=ci"],
            ["volumes", "--reap-networks"],
            ["--every", "1m", "--once", "volumes"],
            ["images"],
            [],
        ],
    )
    def test_invalid_arguments_exit_2(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(argv)

        assert exc_info.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse("--version")

        assert exc_info.value.code == 0
        assert "docker-reaper" in capsys.readouterr().out


class TestApplyArgs:
    """Tests for command-line overrides of environment configuration."""

    def test_cli_overrides_environment(self):
        config = ReaperConfig(every=timedelta(minutes=10), log_level="WARNING")

        apply_args(config, parse("--every", "30s", "--log-level", "debug", "volumes", "--max-age", "1h"))

        assert config.every == timedelta(seconds=30)
        assert config.log_level == "DEBUG"
        assert config.max_age == timedelta(hours=1)

    def test_environment_kept_when_flags_absent(self):
        config = ReaperConfig(once=True, dry_run=True, min_age=timedelta(hours=1))

        apply_args(config, parse("volumes"))

        assert config.once is True
        assert config.dry_run is True
        assert config.min_age == timedelta(hours=1)

    def test_every_flag_overrides_environment_once(self):
        config = ReaperConfig(once=True)

        apply_args(config, parse("--every", "1m", "volumes"))

        assert config.once is False

    def test_reap_networks_only_for_containers(self):
        config = ReaperConfig()

        apply_args(config, parse("networks"))

        assert config.reap_networks is False


class TestRunLoop:
    """Tests for the run loop."""

    @patch("docker_reaper.cli.execute_reaper")
    def test_once(self, mock_execute):
        engine = MagicMock()
        sleep = MagicMock()
        config = ReaperConfig(once=True)

        run_loop(engine, "volumes", config, sleep=sleep)

        mock_execute.assert_called_once_with(engine, "volumes", config)
        sleep.assert_not_called()

    @patch("docker_reaper.cli.execute_reaper")
    def test_sleeps_between_runs(self, mock_execute):
        sleep = MagicMock(side_effect=[None, KeyboardInterrupt])

        with pytest.raises(KeyboardInterrupt):
            run_loop(MagicMock(), "networks", ReaperConfig(every=timedelta(minutes=5)), sleep=sleep)

        assert mock_execute.call_count == 2
        sleep.assert_called_with(300.0)

    @patch("docker_reaper.cli.execute_reaper")
    def test_batch_errors_do_not_stop_loop(self, mock_execute):
        mock_execute.side_effect = [{"error": "Failed to list networks"}, {"resources_found": 0}]
        sleep = MagicMock(side_effect=[None, KeyboardInterrupt])

        with pytest.raises(KeyboardInterrupt):
            run_loop(MagicMock(), "networks", ReaperConfig(), sleep=sleep)

        assert mock_execute.call_count == 2


@patch("docker_reaper.cli.configure_logging")
@patch("docker_reaper.cli.run_loop")
@patch("docker_reaper.cli.DockerClientManager")
class TestMain:
    """Tests for the main entry point."""

    def test_success(self, mock_client_manager, mock_run_loop, mock_configure_logging):
        with patch.dict(os.environ, {}, clear=True):
            exit_code = main(["--once", "volumes", "--min-age", "1h"])

        assert exit_code == 0
        engine, kind, config = mock_run_loop.call_args.args
        assert kind == "volumes"
        assert config.once is True
        assert config.min_age == timedelta(hours=1)
        mock_configure_logging.assert_called_once_with(config)
        mock_client_manager.return_value.close.assert_called_once()

    def test_environment_used(self, mock_client_manager, mock_run_loop, mock_configure_logging):
        with patch.dict(os.environ, {"REAPER_DRY_RUN": "true", "REAPER_ONCE": "1"}, clear=True):
            main(["containers"])

        config = mock_run_loop.call_args.args[2]
        assert config.dry_run is True
        assert config.once is True

    def test_every_and_once_conflict(self, mock_client_manager, mock_run_loop, mock_configure_logging, capsys):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(SystemExit) as exc_info:
                main(["--every", "1m", "volumes", "--once"])

        assert exc_info.value.code == 2
        mock_run_loop.assert_not_called()

    def test_empty_age_window_rejected(self, mock_client_manager, mock_run_loop, mock_configure_logging, capsys):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(SystemExit) as exc_info:
                main(["volumes", "--min-age", "2h", "--max-age", "1h"])

        assert exc_info.value.code == 2
        assert "min_age must be less than max_age" in capsys.readouterr().err

    def test_bad_environment_rejected(self, mock_client_manager, mock_run_loop, mock_configure_logging, capsys):
        with patch.dict(os.environ, {"REAPER_EVERY": "often"}, clear=True):
            with pytest.raises(SystemExit) as exc_info:
                main(["volumes"])

        assert exc_info.value.code == 2
        assert "REAPER_EVERY" in capsys.readouterr().err

    @patch("docker_reaper.cli.CleanupEngine", side_effect=DockerException("daemon not running"))
    def test_connection_failure(self, mock_engine, mock_client_manager, mock_run_loop, mock_configure_logging):
        with patch.dict(os.environ, {}, clear=True):
            exit_code = main(["volumes"])

        assert exit_code == 1
        mock_run_loop.assert_not_called()

    def test_interrupt(self, mock_client_manager, mock_run_loop, mock_configure_logging):
        mock_run_loop.side_effect = KeyboardInterrupt

        with patch.dict(os.environ, {}, clear=True):
            exit_code = main(["networks"])

        assert exit_code == 130
        mock_client_manager.return_value.close.assert_called_once()
