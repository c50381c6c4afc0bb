"""
sharedstore: Configuration and Entry Point Tests
"""

import logging

import pytest
from pydantic import ValidationError as PydanticValidationError
from unittest.mock import patch

import sharedstore.main as app_module
from sharedstore.__main__ import main
from sharedstore.config import DEFAULT_APP_NAME, Settings


class TestSettings:

    def test_app_name_falls_back_to_literal_default(self, monkeypatch):
        monkeypatch.delenv("APP_NAME", raising=False)

        assert Settings(_env_file=None).app_name == "Unknown App"

    def test_blank_app_name_uses_default(self, monkeypatch):
        monkeypatch.setenv("APP_NAME", "   ")

        assert Settings(_env_file=None).app_name == DEFAULT_APP_NAME

    def test_reads_store_coordinates_from_environment(self, monkeypatch):
        monkeypatch.setenv("APP_NAME", "App 2")
        monkeypatch.setenv("PORT", "3002")
        monkeypatch.setenv("DB_HOST", "db")
        monkeypatch.setenv("DB_PORT", "5433")
        monkeypatch.setenv("DB_USER", "myuser")
        monkeypatch.setenv("DB_PASSWORD", "mypassword")
        monkeypatch.setenv("DB_NAME", "mydatabase")

        s = Settings(_env_file=None)

        assert s.app_name == "App 2"
        assert s.port == 3002
        assert s.sqlalchemy_url == "postgresql+asyncpg://myuser:mypassword@db:5433/mydatabase"

    def test_password_is_escaped_in_url(self):
        s = Settings(_env_file=None, db_user="u", db_password="p@ss/word", db_host="db", db_name="d")

        assert s.sqlalchemy_url == "postgresql+asyncpg://u:p%40ss%2Fword@db:5432/d"

    def test_database_url_overrides_parts(self):
        s = Settings(
            _env_file=None,
            db_host="ignored",
            database_url="postgresql+asyncpg://x:y@elsewhere:5432/z",
        )

        assert s.sqlalchemy_url == "postgresql+asyncpg://x:y@elsewhere:5432/z"

    def test_log_level_is_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, log_level="LOUD")


class TestEntryPoint:

    @pytest.mark.parametrize(
        "service,target",
        [("users", "sharedstore.main:user_app"), ("cache", "sharedstore.main:cache_app")],
    )
    def test_runs_selected_app_with_uvicorn(self, service, target):
        with patch("sharedstore.__main__.uvicorn.run") as run, \
                patch("sharedstore.__main__.setup_logging") as setup:
            main([service, "--port", "3002"])

        setup.assert_called_once_with("WARNING")

        run.assert_called_once()
        args, kwargs = run.call_args
        assert args == (target,)
        assert kwargs["port"] == 3002

    def test_unknown_service_exits(self):
        with pytest.raises(SystemExit):
            main(["postgres"])


class TestSetupLogging:

    def test_configures_root_logger_only_once(self, monkeypatch):
        monkeypatch.setattr(app_module, "_logging_configured", False)

        with patch("sharedstore.main.logging.basicConfig") as basic_config:
            app_module.setup_logging("INFO")
            app_module.setup_logging("DEBUG")

        basic_config.assert_called_once()
        assert basic_config.call_args.kwargs["level"] == logging.INFO
