# ABOUTME: Unit tests for the existence poller
# ABOUTME: Tests settle conditions, attempt budget and sleep cadence

from unittest.mock import MagicMock

import pytest

from vsts_client.utils.client import ErrorKind, VstsError
from vsts_client.utils.polling import wait_for_existence


@pytest.mark.unit
class TestWaitForExistence:
    """Tests for wait_for_existence."""

    def test_found_on_third_call(self, fake_sleep):
        """Test the poller stops as soon as the resource appears."""
        exists = MagicMock(side_effect=[False, False, True])

        wait_for_existence("NewProj", True, exists, sleep=fake_sleep)

        assert exists.call_count == 3
        exists.assert_called_with("NewProj")
        assert fake_sleep.calls == [2.0, 2.0, 2.0]

    def test_already_settled(self, fake_sleep):
        """Test a matching first observation needs one lookup."""
        exists = MagicMock(return_value=True)

        wait_for_existence("NewProj", True, exists, sleep=fake_sleep)

        assert exists.call_count == 1
        assert fake_sleep.calls == [2.0]

    def test_waits_for_removal(self, fake_sleep):
        """Test should_exist=False waits for disappearance."""
        exists = MagicMock(side_effect=[True, False])

        wait_for_existence("OldProj", False, exists, sleep=fake_sleep)

        assert exists.call_count == 2

    def test_budget_exhausted(self, fake_sleep):
        """Test budget + 1 lookups then a TIMEOUT naming the resource."""
        exists = MagicMock(return_value=False)

        with pytest.raises(VstsError) as exc_info:
            wait_for_existence("NewProj", True, exists, max_attempts=5, sleep=fake_sleep)

        assert exists.call_count == 6
        assert len(fake_sleep.calls) == 6
        assert exc_info.value.kind is ErrorKind.TIMEOUT
        assert "NewProj" in str(exc_info.value)

    def test_default_budget(self, fake_sleep):
        """Test the default budget allows 31 lookups."""
        exists = MagicMock(return_value=False)

        with pytest.raises(VstsError):
            wait_for_existence("NewProj", True, exists, sleep=fake_sleep)

        assert exists.call_count == 31

    def test_custom_interval(self, fake_sleep):
        """Test the interval is passed to sleep."""
        exists = MagicMock(side_effect=[False, True])

        wait_for_existence("NewProj", True, exists, interval=0.5, sleep=fake_sleep)

        assert fake_sleep.calls == [0.5, 0.5]

    def test_lookup_error_propagates(self, fake_sleep):
        """Test lookup failures stop polling immediately."""
        failure = VstsError(ErrorKind.STATUS, "Unauthorized", code=401)
        exists = MagicMock(side_effect=failure)

        with pytest.raises(VstsError) as exc_info:
            wait_for_existence("NewProj", True, exists, sleep=fake_sleep)

        assert exc_info.value is failure
        assert exists.call_count == 1
