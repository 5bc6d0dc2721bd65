from __future__ import annotations

import random
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Any, List, Optional, Tuple

from alerts.alert_models import Band, BudgetAlert, Severity, TransientNotice
from notifications.notification_model import NotificationType


MOTIVATIONAL_MESSAGES: List[Tuple[str, str]] = [
    ("Keep it up! 💪", "Every rupee tracked is a step toward financial freedom. You're doing great!"),
    ("Smart money move! 🧠", "Tracking expenses regularly puts you ahead of 80% of people. Stay consistent!"),
    ("Financial hero! 🦸", "Small savings today lead to big achievements tomorrow. Keep tracking!"),
    ("You're on track! 🎯", "Consistency is the key to financial success. Check your budgets today!"),
    ("Money wisdom! 💡", "A budget tells your money where to go instead of wondering where it went."),
]


def format_inr(amount: Decimal | float) -> str:
    """
    Format an amount in rupees with Indian digit grouping.

    8000 -> "₹8,000", 150000 -> "₹1,50,000", 1234.5 -> "₹1,234.5"
    """
    value = Decimal(str(abs(amount))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    whole, _, frac = f"{value:f}".partition(".")
    frac = frac.rstrip("0")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups: List[str] = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    sign = "-" if amount < 0 else ""
    return f"{sign}₹{whole}" + (f".{frac}" if frac else "")


def display_pct(pct: Any, band: Band = Band.NONE, warn_threshold: Any = 80) -> int:
    """
    Whole percentage shown to the user, truncated (112.5 -> 112) but kept
    inside the alert's band so 100.4% never reads "100%" on an overspend.
    """
    shown = int(Decimal(str(pct)).to_integral_value(rounding=ROUND_FLOOR))
    if band is Band.EXCEEDED:
        return max(shown, 101)
    if band is Band.WARN:
        floor_pct = int(Decimal(str(warn_threshold)).to_integral_value(rounding=ROUND_FLOOR))
        return min(max(shown, floor_pct + 1), 100)
    return shown


def _label(emoji: str, text: str) -> str:
    return f"{emoji} {text}".strip()


def notice_for(alert: BudgetAlert) -> TransientNotice:
    pct = display_pct(alert.pct, alert.band, alert.warn_threshold)
    limit = format_inr(alert.limit)
    if alert.band is Band.EXCEEDED:
        return TransientNotice(
            title=_label(alert.emoji, f"Budget exceeded: {alert.category}"),
            description=f"You've overspent by {format_inr(alert.over_amount)} ({pct}% of {limit} budget)",
            severity=Severity.ERROR,
            duration_ms=6000,
        )
    return TransientNotice(
        title=_label(alert.emoji, f"Approaching {alert.category} limit"),
        description=f"{pct}% of {limit} {alert.category} budget used.",
        severity=Severity.WARNING,
        duration_ms=5000,
    )


def notification_for(alert: BudgetAlert) -> Tuple[NotificationType, str, str]:
    """(type, title, message) for the durable notification of an alert."""
    spent = format_inr(alert.spent)
    limit = format_inr(alert.limit)
    if alert.band is Band.EXCEEDED:
        return (
            NotificationType.BUDGET_ALERT,
            _label(alert.emoji, f"{alert.category} budget exceeded!"),
            f"You've spent {spent} of your {limit} budget, {format_inr(alert.over_amount)} over limit.",
        )
    return (
        NotificationType.BUDGET_WARNING,
        _label(alert.emoji, f"{alert.category} budget at {display_pct(alert.pct, alert.band, alert.warn_threshold)}%"),
        f"You've used {spent} of your {limit} {alert.category} budget.",
    )


def pick_motivational(rng: Optional[random.Random] = None) -> Tuple[str, str]:
    return (rng or random).choice(MOTIVATIONAL_MESSAGES)
