# ABOUTME: Unit tests for logging utilities
# ABOUTME: Tests correlation IDs and configure_logging

from unittest.mock import MagicMock, patch

import pytest

from vsts_client.utils.logging import (
    add_correlation_id,
    configure_logging,
    correlation_id,
    get_correlation_id,
    set_correlation_id,
)


@pytest.mark.unit
class TestCorrelationId:
    """Tests for correlation ID generation and context management."""

    def test_generates_new_when_empty(self):
        """Test a new 8-character hex ID is generated when none exists."""
        correlation_id.set("")

        cid = get_correlation_id()

        assert len(cid) == 8
        int(cid, 16)

    def test_returns_existing(self):
        """Test an explicitly set ID is returned."""
        set_correlation_id("test1234")

        assert get_correlation_id() == "test1234"

    def test_preserves_value(self):
        """Test subsequent calls return the same generated ID."""
        correlation_id.set("")

        assert get_correlation_id() == get_correlation_id()

    def test_reset_with_empty_string(self):
        """Test setting "" causes a fresh ID on next access."""
        set_correlation_id("old12345")
        set_correlation_id("")

        assert get_correlation_id() != "old12345"


@pytest.mark.unit
class TestAddCorrelationId:
    """Tests for the add_correlation_id processor."""

    def test_adds_correlation_id_to_event_dict(self):
        """Test the processor enriches the event dictionary."""
        set_correlation_id("proc1234")

        result = add_correlation_id(MagicMock(), "info", {"event": "Making VSTS API request"})

        assert result["correlation_id"] == "proc1234"
        assert result["event"] == "Making VSTS API request"


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_output_by_default(self):
        """Test console rendering is the default."""
        with patch("vsts_client.utils.logging.structlog") as mock_structlog:
            configure_logging()

            mock_structlog.dev.ConsoleRenderer.assert_called_once()
            mock_structlog.processors.JSONRenderer.assert_not_called()
            mock_structlog.configure.assert_called_once()

    def test_json_output(self):
        """Test JSON rendering when requested."""
        with patch("vsts_client.utils.logging.structlog") as mock_structlog:
            configure_logging(json_output=True)

            mock_structlog.processors.JSONRenderer.assert_called_once()
            mock_structlog.dev.ConsoleRenderer.assert_not_called()

    @pytest.mark.parametrize(
        ("level", "expected"),
        [("DEBUG", 10), ("info", 20), ("WARNING", 30), ("ERROR", 40), ("bogus", 20)],
    )
    def test_level_filtering(self, level, expected):
        """Test the level name maps to a standard logging level."""
        with patch("vsts_client.utils.logging.structlog") as mock_structlog:
            configure_logging(level=level)

            mock_structlog.make_filtering_bound_logger.assert_called_once_with(expected)

    def test_processor_pipeline(self):
        """Test the correlation processor runs before the renderer."""
        with patch("vsts_client.utils.logging.structlog") as mock_structlog:
            configure_logging()

            processors = mock_structlog.configure.call_args[1]["processors"]
            assert len(processors) == 5
            assert processors[3] is add_correlation_id
