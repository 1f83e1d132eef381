"""
Unit tests for the entry point of the dashboard.

The tests follow the Arrange-Act-Assert (AAA) pattern.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

from icinga_dashboard.__main__ import main
from icinga_dashboard.config import DashboardContext

VALID_CONFIG = """
[http_server]
listen_socket_address = "127.0.0.1:8080"

[icinga_api]
base_url = "https://icinga.example.com:5665/v1/"
username = "dashboard"
password = "secret"
"""


def make_context(config_path: Path) -> DashboardContext:
    return DashboardContext(
        config_path=str(config_path),
        logging_type="dev",
        logging_config_file="",
    )


def test_main_should_fail_when_config_cannot_be_loaded(tmp_path: Path) -> None:
    # Arrange
    context = make_context(tmp_path / "missing.toml")

    # Act
    with patch("icinga_dashboard.__main__.web.run_app") as run_app:
        exit_code = main(context)

    # Assert
    assert exit_code == 1
    run_app.assert_not_called()


def test_main_should_serve_on_configured_address(tmp_path: Path) -> None:
    # Arrange
    config_path = tmp_path / "config.toml"
    config_path.write_text(VALID_CONFIG, encoding="utf-8")

    # Act
    with patch("icinga_dashboard.__main__.web.run_app") as run_app:
        exit_code = main(make_context(config_path))

    # Assert
    assert exit_code == 0
    run_app.assert_called_once()
    _, kwargs = run_app.call_args
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 8080


def test_main_should_not_serve_invalid_config(tmp_path: Path) -> None:
    # Arrange
    config_path = tmp_path / "config.toml"
    config_path.write_text(VALID_CONFIG.replace("127.0.0.1:8080", "nowhere"), encoding="utf-8")
    run_app = MagicMock()

    # Act
    with patch("icinga_dashboard.__main__.web.run_app", run_app):
        exit_code = main(make_context(config_path))

    # Assert
    assert exit_code == 1
    run_app.assert_not_called()
