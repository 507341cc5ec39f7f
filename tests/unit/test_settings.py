from unittest.mock import patch, mock_open
import pytest
from pydantic import ValidationError
from keydash.settings import load_settings, KeydashSettings


def test_load_settings():
    read_data = """
secret: "abcdefghabcdefghabcdefghabcdefgh"
log_level: debug
log_format: json
backend: sql
connections:
  database_url: "sqlite:///keydash.db"
default_admin:
  username: root
  password: changeme
keys:
  generation_attempts: 3
web:
  cors_origins:
    - http://localhost:3000
    """

    with patch("keydash.settings.open", mock_open(read_data=read_data)):
        settings = load_settings()
        assert isinstance(settings, KeydashSettings)
        assert settings.secret == "abcdefghabcdefghabcdefghabcdefgh"
        assert settings.log_level == "debug"
        assert settings.log_format == "json"
        assert settings.backend == "sql"
        assert settings.kvstore == "in_memory"
        assert settings.connections.database_url == "sqlite:///keydash.db"
        assert settings.default_admin.username == "root"
        assert settings.default_admin.password == "changeme"
        assert settings.keys.generation_attempts == 3
        assert settings.keys.credit_cost == 1
        assert settings.web.session_cookie == "sid"
        assert settings.web.session_max_age == 86400
        assert settings.web.cors_origins == ["http://localhost:3000"]


def test_load_settings_with_validation_error():
    read_data = """
log_level: something
"""

    with patch("keydash.settings.open", mock_open(read_data=read_data)):
        with pytest.raises(ValidationError):
            load_settings()


def test_short_secret_is_rejected():
    with pytest.raises(ValidationError):
        KeydashSettings(secret="too-short")


def test_credit_cost_must_be_positive():
    with pytest.raises(ValidationError):
        KeydashSettings(secret="test" * 8, keys={"credit_cost": 0})
