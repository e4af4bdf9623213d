"""Dashboard aggregates over the caller's visible inspections and payouts."""

from dataclasses import dataclass, field
from typing import Any, Iterable

from fielddesk.constants import REGION_NO_DATA, REGION_UNKNOWN


def _get(row: Any, key: str, default: Any = None) -> Any:
    if isinstance(row, dict):
        return row.get(key, default)
    return getattr(row, key, default)


def _as_number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


@dataclass
class DashboardSummary:
    inspections: int = 0
    volume: float = 0.0
    total_payouts: int = 0
    paid: int = 0
    pending: int = 0
    regions: dict[str, int] = field(default_factory=dict)

    @property
    def region_chart(self) -> list[dict]:
        return [{"name": name, "count": count} for name, count in self.regions.items()]

    @property
    def payout_status_chart(self) -> list[dict]:
        return [
            {"name": "Paid", "value": self.paid},
            {"name": "Pending", "value": self.pending},
        ]


def region_breakdown(inspections: Iterable[Any]) -> dict[str, int]:
    """Count inspections per region, in first-seen order.

    A blank region counts as ``Unknown``; no input yields ``{"No Data": 0}``.
    """
    counts: dict[str, int] = {}
    for row in inspections:
        region = _get(row, "region") or REGION_UNKNOWN
        counts[region] = counts.get(region, 0) + 1
    return counts or {REGION_NO_DATA: 0}


def summarize(inspections: Iterable[Any], payouts: Iterable[Any]) -> DashboardSummary:
    inspections = list(inspections)
    summary = DashboardSummary(
        inspections=len(inspections),
        volume=sum((_as_number(_get(row, "loan_amount")) for row in inspections), 0.0),
        regions=region_breakdown(inspections),
    )

    for row in payouts:
        summary.total_payouts += 1
        status = _get(row, "payment_status")
        if status == "Paid":
            summary.paid += 1
        elif status == "Pending":
            summary.pending += 1

    return summary
