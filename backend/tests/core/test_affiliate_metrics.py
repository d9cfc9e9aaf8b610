"""Affiliate Metrics — month windows, growth and conversion figures."""

from datetime import datetime, timezone

from tradedesk.core.affiliate_metrics import (
    conversion_metric, conversion_rate, growth_metric, month_labels, month_start, percent_change,
)

UTC = timezone.utc


def test_month_start_crosses_year():
    now = datetime(2026, 1, 15, 9, 30, tzinfo=UTC)
    assert month_start(now) == datetime(2026, 1, 1, tzinfo=UTC)
    assert month_start(now, 1) == datetime(2025, 12, 1, tzinfo=UTC)
    assert month_start(now, 13) == datetime(2024, 12, 1, tzinfo=UTC)


def test_month_labels_oldest_first():
    labels = month_labels(datetime(2026, 3, 5, tzinfo=UTC))
    assert len(labels) == 12
    assert labels[0] == "2025-04"
    assert labels[-1] == "2026-03"


def test_percent_change():
    assert percent_change(15, 10) == 50
    assert percent_change(5, 10) == -50
    assert percent_change(25, 8) == 213
    assert percent_change(3, 0) == 0


def test_growth_metric_trend():
    assert growth_metric(7, 2, 4) == {"value": 7, "change": -50, "trend": "down"}
    assert growth_metric(7, 0, 0) == {"value": 7, "change": 0, "trend": "up"}


def test_conversion_rate():
    assert conversion_rate(1, 3) == 33
    assert conversion_rate(1, 8) == 13
    assert conversion_rate(5, 0) == 0


def test_conversion_metric_change_in_points():
    assert conversion_metric(2, 1, 4) == {"value": 50, "change": 25, "trend": "up"}
    assert conversion_metric(1, 0, 4) == {"value": 25, "change": 0, "trend": "up"}
    assert conversion_metric(0, 1, 4) == {"value": 0, "change": -25, "trend": "down"}
