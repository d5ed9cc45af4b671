"""
Tests for closure resolution.
"""

import pendulum

from barberslots.domain.closure_resolver import closures_on, is_closed_at, resolve_closure
from barberslots.domain.models import FullDayClosure, NoClosure, PartialClosure, ShopClosure

DAY = pendulum.date(2024, 12, 31)
OTHER_DAY = pendulum.date(2025, 1, 2)


def _full(closure_id: str, day=DAY, reason: str = "Holiday") -> ShopClosure:
    return ShopClosure(id=closure_id, date=day, reason=reason)


def _partial(closure_id: str, start: int, end: int, day=DAY, reason: str = "Renovation") -> ShopClosure:
    return ShopClosure(
        id=closure_id,
        date=day,
        reason=reason,
        is_full_day=False,
        start_time=start,
        end_time=end,
    )


class TestResolveClosure:
    """Tests for resolve_closure."""

    def test_no_closures(self):
        """Test that an empty closure list means the shop is open."""
        assert resolve_closure(DAY, []) == NoClosure()

    def test_closures_on_other_dates_ignored(self):
        """Test that only records on the target date are considered."""
        result = resolve_closure(DAY, [_full("c1", day=OTHER_DAY)])
        assert isinstance(result, NoClosure)

    def test_full_day_closure(self):
        """Test resolving a full-day closure."""
        result = resolve_closure(DAY, [_full("c1", reason="Public Holiday")])
        assert result == FullDayClosure(reason="Public Holiday")

    def test_partial_closure(self):
        """Test resolving a partial closure."""
        result = resolve_closure(DAY, [_partial("c1", 840, 1200)])
        assert result == PartialClosure(start=840, end=1200, reason="Renovation")

    def test_full_day_wins_over_partial(self):
        """Test that a full-day record takes precedence on the same date."""
        closures = [_partial("c1", 840, 1200), _full("c2", reason="Staff Training")]

        result = resolve_closure(DAY, closures)

        assert result == FullDayClosure(reason="Staff Training")

    def test_earliest_partial_wins(self):
        """Test that the earliest partial window is used among several."""
        closures = [_partial("c1", 900, 960, reason="Later"), _partial("c2", 600, 660, reason="Earlier")]

        result = resolve_closure(DAY, closures)

        assert result == PartialClosure(start=600, end=660, reason="Earlier")

    def test_accepts_generator_input(self):
        """Test that any iterable of closures works."""
        result = resolve_closure(DAY, (c for c in [_full("c1")]))
        assert isinstance(result, FullDayClosure)

    def test_closures_on(self):
        """Test filtering closure records by date."""
        today = _full("c1")
        later = _full("c2", day=OTHER_DAY)
        assert closures_on(DAY, [today, later]) == [today]


class TestIsClosedAt:
    """Tests for is_closed_at."""

    def test_full_day_closed_at_any_time(self):
        """Test that a full-day closure closes every minute."""
        closures = [_full("c1")]

        assert is_closed_at(DAY, 0, closures)
        assert is_closed_at(DAY, 600, closures)
        assert is_closed_at(DAY, 1439, closures)

    def test_partial_closure_boundaries(self):
        """Test that a partial closure is closed on [start, end)."""
        closures = [_partial("c1", 840, 1200)]

        assert not is_closed_at(DAY, 839, closures)
        assert is_closed_at(DAY, 840, closures)
        assert is_closed_at(DAY, 1199, closures)
        assert not is_closed_at(DAY, 1200, closures)

    def test_open_without_closure(self):
        """Test that dates without closures are open."""
        assert not is_closed_at(DAY, 600, [_full("c1", day=OTHER_DAY)])
