"""Tests for the sync status enum."""

from __future__ import annotations

import pytest

from sync_estimator.estimator import SyncStatus


class TestSyncStatusValues:
    """Tests for status numbering and helpers."""

    def test_numeric_values(self) -> None:
        """Statuses carry stable numeric codes."""
        assert SyncStatus.NOT_STARTED.value == 0
        assert SyncStatus.PENDING.value == 1
        assert SyncStatus.SYNCING.value == 2
        assert SyncStatus.COMPLETED.value == 3

    def test_is_started(self) -> None:
        """Only NOT_STARTED is not started."""
        assert not SyncStatus.NOT_STARTED.is_started
        assert all(s.is_started for s in SyncStatus if s is not SyncStatus.NOT_STARTED)

    def test_is_completed(self) -> None:
        """Only COMPLETED is completed."""
        assert [s for s in SyncStatus if s.is_completed] == [SyncStatus.COMPLETED]


class TestSyncStatusTransitions:
    """Tests for the expected-transition table."""

    @pytest.mark.parametrize("target", [SyncStatus.SYNCING, SyncStatus.PENDING])
    def test_first_classification_from_not_started(self, target: SyncStatus) -> None:
        """The first tick after a reset lands on SYNCING or PENDING."""
        assert SyncStatus.NOT_STARTED.can_transition_to(target)

    def test_not_started_cannot_jump_to_completed(self) -> None:
        """COMPLETED needs a stable network tip, which needs a prior sample."""
        assert not SyncStatus.NOT_STARTED.can_transition_to(SyncStatus.COMPLETED)

    @pytest.mark.parametrize(
        "source", [SyncStatus.SYNCING, SyncStatus.PENDING, SyncStatus.COMPLETED]
    )
    def test_any_started_status_can_reset(self, source: SyncStatus) -> None:
        """A node change returns every started status to NOT_STARTED."""
        assert source.can_transition_to(SyncStatus.NOT_STARTED)

    def test_completed_is_not_terminal(self) -> None:
        """A moving chain tip can push COMPLETED back."""
        assert SyncStatus.COMPLETED.can_transition_to(SyncStatus.SYNCING)
        assert SyncStatus.COMPLETED.can_transition_to(SyncStatus.PENDING)

    @pytest.mark.parametrize("status", list(SyncStatus))
    def test_self_transition_is_not_listed(self, status: SyncStatus) -> None:
        """Staying put is not a transition."""
        assert not status.can_transition_to(status)
