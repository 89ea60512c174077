"""Tests for the occupancy helpers used by statistics and reports."""

from datetime import date
from types import SimpleNamespace

import pytest

from app.services.statistics_service import (
    current_month_range,
    days_in_period,
    month_range,
    occupancy_percentage,
    occupied_nights,
)


def _stay(check_in: date, check_out: date) -> SimpleNamespace:
    return SimpleNamespace(check_in_date=check_in, check_out_date=check_out)


class TestPeriods:
    """Tests for period helpers."""

    def test_days_in_period_is_inclusive(self) -> None:
        assert days_in_period(date(2024, 6, 1), date(2024, 6, 30)) == 30
        assert days_in_period(date(2024, 6, 1), date(2024, 6, 1)) == 1

    def test_month_range_leap_february(self) -> None:
        assert month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_current_month_range(self) -> None:
        assert current_month_range(date(2023, 12, 15)) == (
            date(2023, 12, 1),
            date(2023, 12, 31),
        )


class TestOccupiedNights:
    """Tests for clipping stays to a period."""

    def test_stay_inside_period(self) -> None:
        stays = [_stay(date(2024, 6, 10), date(2024, 6, 14))]
        assert occupied_nights(stays, date(2024, 6, 1), date(2024, 6, 30)) == 4

    def test_stay_crossing_period_start(self) -> None:
        stays = [_stay(date(2024, 5, 28), date(2024, 6, 3))]
        assert occupied_nights(stays, date(2024, 6, 1), date(2024, 6, 30)) == 2

    def test_stay_crossing_period_end(self) -> None:
        # Nights of 29 and 30 June fall inside an inclusive period
        stays = [_stay(date(2024, 6, 29), date(2024, 7, 4))]
        assert occupied_nights(stays, date(2024, 6, 1), date(2024, 6, 30)) == 2

    def test_stay_outside_period(self) -> None:
        stays = [_stay(date(2024, 7, 1), date(2024, 7, 5))]
        assert occupied_nights(stays, date(2024, 6, 1), date(2024, 6, 30)) == 0

    def test_multiple_stays_add_up(self) -> None:
        stays = [
            _stay(date(2024, 6, 1), date(2024, 6, 5)),
            _stay(date(2024, 6, 20), date(2024, 6, 25)),
        ]
        assert occupied_nights(stays, date(2024, 6, 1), date(2024, 6, 30)) == 9


class TestOccupancyPercentage:
    """Tests for occupancy_percentage."""

    def test_single_property(self) -> None:
        assert occupancy_percentage(15, 30) == 50.0

    def test_several_properties(self) -> None:
        assert occupancy_percentage(30, 30, properties=4) == 25.0

    def test_rounded_to_two_places(self) -> None:
        assert occupancy_percentage(1, 3) == pytest.approx(33.33)

    def test_capped_at_100(self) -> None:
        assert occupancy_percentage(40, 30) == 100.0

    def test_empty_capacity(self) -> None:
        assert occupancy_percentage(5, 30, properties=0) == 0.0
