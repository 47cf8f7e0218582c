"""Tests for logging and observability helpers."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from dutydesk import __version__
from dutydesk.core.logging import configure_logfire, log_with_context


@pytest.mark.unit
class TestConfigureLogfire:
    """Tests for configure_logfire."""

    def test_configures_service_identity(self):
        with patch("dutydesk.core.logging.logfire.configure") as mock_configure:
            configure_logfire()

        kwargs = mock_configure.call_args.kwargs
        assert kwargs["service_name"] == "dutydesk"
        assert kwargs["service_version"] == __version__
        assert kwargs["send_to_logfire"] == "if-token-present"


@pytest.mark.unit
class TestLogWithContext:
    """Tests for log_with_context."""

    def test_passes_context_as_extra(self):
        logger = MagicMock(spec=logging.Logger)

        log_with_context(logger, "WARNING", "Malformed date", duty_id="d1", value="31/02")

        logger.warning.assert_called_once_with("Malformed date", extra={"duty_id": "d1", "value": "31/02"})

    def test_context_lands_on_record(self, caplog):
        logger = logging.getLogger("dutydesk.test")

        with caplog.at_level(logging.INFO, logger="dutydesk.test"):
            log_with_context(logger, "info", "Committed", item_id="t1")

        assert caplog.records[0].item_id == "t1"
