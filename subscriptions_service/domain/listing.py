"""
Subscription filter / lister.

Overlap rule (true interval overlap, shared by listing and cost sums):
  sub.end >= window.start  (open end or absent window start always pass)
  sub.start <= window.end  (absent window end always passes)

Ordering: start month, then service name, then id.
Pagination: ordering first, then offset/limit.
"""
from typing import Iterable

from subscriptions_service.domain.subscription import QueryWindow, SubscriptionSnapshot


DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


def matches_window(sub: SubscriptionSnapshot, window: QueryWindow) -> bool:
    if window.is_empty:
        return False
    if sub.user_id != window.user_id:
        return False
    if window.service_name is not None and sub.service_name != window.service_name:
        return False
    if window.start is not None and sub.end is not None and sub.end < window.start:
        return False
    if window.end is not None and sub.start > window.end:
        return False
    return True


def filter_candidates(
    subs: Iterable[SubscriptionSnapshot],
    window: QueryWindow,
) -> list[SubscriptionSnapshot]:
    return [s for s in subs if matches_window(s, window)]


def order_subscriptions(subs: Iterable[SubscriptionSnapshot]) -> list[SubscriptionSnapshot]:
    return sorted(subs, key=lambda s: (s.start, s.service_name, str(s.id)))


def clamp_pagination(limit: int | None, offset: int | None) -> tuple[int, int]:
    """
    Out-of-range values are replaced, not rejected.

    Лимит вне диапазона [1, MAX_PAGE_LIMIT] заменяется на DEFAULT_PAGE_LIMIT.
    Смещение меньше 1 становится 0.
    """
    if limit is None or limit < 1 or limit > MAX_PAGE_LIMIT:
        limit = DEFAULT_PAGE_LIMIT
    if offset is None or offset < 1:
        offset = 0
    return limit, offset


def paginate(
    subs: Iterable[SubscriptionSnapshot],
    limit: int | None,
    offset: int | None,
) -> list[SubscriptionSnapshot]:
    limit, offset = clamp_pagination(limit, offset)
    ordered = order_subscriptions(subs)
    return ordered[offset:offset + limit]
