from datetime import datetime, timezone
from decimal import Decimal

import pytest

from alerts.alert_models import AlertState, Band, BudgetAlert, Severity
from alerts.budget_alert_engine import classify
from alerts.messages import (
    MOTIVATIONAL_MESSAGES,
    display_pct,
    format_inr,
    notice_for,
    notification_for,
    pick_motivational,
)
from alerts.spend import month_start, spend_by_category
from notifications.notification_model import NotificationType
from schemas.money import coerce_amount
from transactions.transaction_model import TransactionSnapshot


@pytest.mark.parametrize(
    "pct, band",
    [(0, Band.NONE), (75, Band.NONE), (80, Band.NONE), (80.01, Band.WARN), (100, Band.WARN), (100.01, Band.EXCEEDED)],
)
def test_classify_band_edges(pct, band):
    assert classify(pct) == band


def test_alert_state_ladder():
    state = AlertState()
    assert state.should_alert("b1", Band.WARN)

    state.mark("b1", Band.WARN)
    assert not state.should_alert("b1", Band.WARN)
    assert state.should_alert("b1", Band.EXCEEDED)

    state.mark("b1", Band.EXCEEDED)
    assert not state.should_alert("b1", Band.WARN)
    assert ("b1", Band.WARN) in state and ("b1", Band.EXCEEDED) in state
    assert state.should_alert("b2", Band.WARN)
    assert len(state) == 2


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "₹0"),
        (999, "₹999"),
        (8000, "₹8,000"),
        (150000, "₹1,50,000"),
        (12345678, "₹1,23,45,678"),
        (1234.5, "₹1,234.5"),
        (Decimal("99.999"), "₹100"),
        (-500, "-₹500"),
    ],
)
def test_format_inr(amount, expected):
    assert format_inr(amount) == expected


def test_display_pct_truncates():
    assert display_pct(Decimal("112.5"), Band.EXCEEDED) == 112
    assert display_pct(Decimal("85"), Band.WARN) == 85
    assert display_pct(Decimal("79.9")) == 79


@pytest.mark.parametrize(
    "pct, band, shown",
    [
        (Decimal("80.5"), Band.WARN, 81),
        (Decimal("100"), Band.WARN, 100),
        (Decimal("100.4"), Band.EXCEEDED, 101),
        (Decimal("100.0001"), Band.EXCEEDED, 101),
        (Decimal("250.9"), Band.EXCEEDED, 250),
    ],
)
def test_display_pct_stays_inside_band(pct, band, shown):
    assert display_pct(pct, band, Decimal("80")) == shown


def test_warn_copy_at_band_edge_reads_above_threshold():
    alert = BudgetAlert("b1", "Food", "", Band.WARN, spent=Decimal("6440"), limit=Decimal("8000"), pct=Decimal("80.5"))
    assert notice_for(alert).description == "81% of ₹8,000 Food budget used."


def test_spend_by_category_sums_absolute_amounts():
    txns = [
        TransactionSnapshot(category="Food", amount=-250),
        TransactionSnapshot(category="Food", amount="-750.50"),
        TransactionSnapshot(category="Food", amount=100),
        TransactionSnapshot(category="Travel", amount=-40),
        TransactionSnapshot(category="Travel", amount="oops"),
    ]
    assert spend_by_category(txns) == {"Food": Decimal("1100.50"), "Travel": Decimal("40")}


def test_spend_by_category_empty():
    assert spend_by_category([]) == {}


def test_month_start_is_timezone_aligned():
    # 20:00 UTC on the last day of the month is already the next month in IST
    now = datetime(2026, 10, 31, 20, 0, tzinfo=timezone.utc)
    start = month_start(now, "Asia/Kolkata")
    assert (start.year, start.month, start.day, start.hour) == (2026, 11, 1, 0)

    utc_start = month_start(now, "UTC")
    assert (utc_start.month, utc_start.day) == (10, 1)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, Decimal("0")),
        ("", Decimal("0")),
        ("abc", Decimal("0")),
        ("1,200.50", Decimal("1200.50")),
        (Decimal("8000.00"), Decimal("8000")),
        (Decimal("NaN"), Decimal("0")),
        (float("nan"), Decimal("0")),
        ("inf", Decimal("0")),
        (True, Decimal("0")),
        (42, Decimal("42")),
        (0.1, Decimal("0.1")),
    ],
)
def test_coerce_amount(raw, expected):
    assert coerce_amount(raw) == expected


def test_exceeded_copy():
    alert = BudgetAlert("b1", "Food", "🍔", Band.EXCEEDED, spent=Decimal("9000"), limit=Decimal("8000"), pct=Decimal("112.5"))

    notice = notice_for(alert)
    assert notice.title == "🍔 Budget exceeded: Food"
    assert notice.description == "You've overspent by ₹1,000 (112% of ₹8,000 budget)"
    assert notice.severity == Severity.ERROR

    kind, title, message = notification_for(alert)
    assert kind == NotificationType.BUDGET_ALERT
    assert title == "🍔 Food budget exceeded!"
    assert message == "You've spent ₹9,000 of your ₹8,000 budget, ₹1,000 over limit."


def test_warn_copy_without_emoji():
    alert = BudgetAlert("b1", "Food", "", Band.WARN, spent=Decimal("6800"), limit=Decimal("8000"), pct=Decimal("85"))

    notice = notice_for(alert)
    assert notice.title == "Approaching Food limit"
    assert notice.description == "85% of ₹8,000 Food budget used."

    kind, title, message = notification_for(alert)
    assert kind == NotificationType.BUDGET_WARNING
    assert title == "Food budget at 85%"
    assert message == "You've used ₹6,800 of your ₹8,000 Food budget."


def test_pick_motivational_from_catalog():
    import random

    assert pick_motivational(random.Random(7)) in MOTIVATIONAL_MESSAGES


def test_notice_feed_is_bounded(notice_feed):
    from alerts.alert_models import TransientNotice

    for i in range(8):
        notice_feed.publish("u1", TransientNotice(title=f"n{i}", description=""))

    assert notice_feed.pending("u1") == 5
    drained = notice_feed.drain("u1")
    assert [n.title for n in drained] == ["n3", "n4", "n5", "n6", "n7"]
    assert notice_feed.drain("u1") == []
