"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Environment variable parsing
- Feature flag handling
- FastAPI instrumentation
- No-op behaviour of the log helpers while Logfire is inactive
"""

import importlib
import os
from unittest.mock import MagicMock, patch

import pytest

from learninggrowth.core import monitoring


@pytest.fixture
def fresh_monitoring():
    """Reload the module after each test so environment patches do not leak."""
    yield
    importlib.reload(monitoring)


class TestLogfireEnvironmentConfiguration:
    def test_logfire_disabled_by_default(self, fresh_monitoring):
        with patch.dict(os.environ, {}, clear=True):
            importlib.reload(monitoring)

            assert monitoring.LOGFIRE_ENABLED is False

    @pytest.mark.parametrize("value", ["true", "1", "yes", "TRUE"])
    def test_logfire_enabled_values(self, value, fresh_monitoring):
        with patch.dict(os.environ, {"LOGFIRE_ENABLED": value}):
            importlib.reload(monitoring)

            assert monitoring.LOGFIRE_ENABLED is True

    def test_service_settings_from_environment(self, fresh_monitoring):
        env = {
            "LOGFIRE_TOKEN": "test-token-12345",
            "LOGFIRE_SERVICE_NAME": "my-custom-service",
            "LOGFIRE_ENVIRONMENT": "staging",
        }
        with patch.dict(os.environ, env):
            importlib.reload(monitoring)

            assert monitoring.LOGFIRE_TOKEN == "test-token-12345"
            assert monitoring.LOGFIRE_SERVICE_NAME == "my-custom-service"
            assert monitoring.LOGFIRE_ENVIRONMENT == "staging"


class TestInitializeLogfire:
    def test_disabled_returns_false(self):
        with (
            patch.object(monitoring, "LOGFIRE_ENABLED", False),
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            assert monitoring.initialize_logfire() is False
            mock_logfire.configure.assert_not_called()

    def test_enabled_without_token_returns_false(self):
        with (
            patch.object(monitoring, "LOGFIRE_ENABLED", True),
            patch.object(monitoring, "LOGFIRE_TOKEN", ""),
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            assert monitoring.initialize_logfire() is False
            mock_logfire.configure.assert_not_called()

    def test_enabled_configures_and_instruments_app(self):
        app = MagicMock()
        with (
            patch.object(monitoring, "LOGFIRE_ENABLED", True),
            patch.object(monitoring, "LOGFIRE_TOKEN", "token"),
            patch.object(monitoring, "_logfire_ready", False),
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            assert monitoring.initialize_logfire(app) is True

            mock_logfire.configure.assert_called_once()
            assert mock_logfire.configure.call_args.kwargs["token"] == "token"
            mock_logfire.instrument_fastapi.assert_called_once_with(app=app)


class TestLogHelpers:
    def test_api_request_is_noop_when_inactive(self):
        with (
            patch.object(monitoring, "_logfire_ready", False),
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            monitoring.log_api_request("GET", "/health", 200, 1.5)

            mock_logfire.info.assert_not_called()

    def test_api_request_is_forwarded_when_active(self):
        with (
            patch.object(monitoring, "_logfire_ready", True),
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            monitoring.log_api_request("GET", "/health", 200, 1.5)

            mock_logfire.info.assert_called_once()
            assert mock_logfire.info.call_args.kwargs["status_code"] == 200

    def test_contract_call_is_forwarded_when_active(self):
        with (
            patch.object(monitoring, "_logfire_ready", True),
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            monitoring.log_contract_call("0xabc", "getClassCount", "read", 3.2)

            kwargs = mock_logfire.info.call_args.kwargs
            assert kwargs["method"] == "getClassCount"
            assert kwargs["kind"] == "read"
