"""
Monthly cost aggregation.

Billing rule for a calendar month:
  - subscriptions to the SAME service overlapping in the month are billed once,
    at the highest price among them;
  - DIFFERENT services are summed.

Pipeline:
  1. expand each subscription into months (clipped to the window)
  2. max(price) per (month, service_name)
  3. sum of the maxima per month
  4. summarize_window: sum over months
"""
from dataclasses import dataclass
from typing import Iterable

from subscriptions_service.domain.month import Month, expand_interval
from subscriptions_service.domain.subscription import SubscriptionSnapshot


@dataclass(frozen=True)
class MonthlyCostEntry:
    month: Month
    cost: int


def aggregate_monthly_costs(
    subscriptions: Iterable[SubscriptionSnapshot],
    as_of: Month,
    start: Month | None = None,
    end: Month | None = None,
) -> dict[Month, int]:
    """
    Cost per month for months with at least one active subscription.

    Args:
        subscriptions: candidates already filtered by user / service
        as_of: current month, bounds open-ended subscriptions
        start: window start (None = unbounded past)
        end: window end (None = no clipping beyond subscription ends)

    Returns:
        {Month: cost}; months without activity are absent
    """
    max_price: dict[tuple[Month, str], int] = {}
    for sub in subscriptions:
        for month in expand_interval(sub.interval, as_of, start, end):
            key = (month, sub.service_name)
            current = max_price.get(key)
            if current is None or sub.price > current:
                max_price[key] = sub.price

    costs: dict[Month, int] = {}
    for (month, _service_name), price in max_price.items():
        costs[month] = costs.get(month, 0) + price
    return costs


def summarize_window(costs: dict[Month, int]) -> int:
    """Total over all months; 0 for an empty mapping."""
    return sum(costs.values())


def monthly_cost_entries(costs: dict[Month, int]) -> list[MonthlyCostEntry]:
    return [MonthlyCostEntry(month=m, cost=costs[m]) for m in sorted(costs)]
