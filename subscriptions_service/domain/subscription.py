"""
Subscription snapshot and query window - transient, request-scoped values.

Ядро (агрегация и листинг) работает только с этими копиями и никогда
не мутирует данные хранилища.
"""
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from subscriptions_service.domain.month import Month, MonthInterval


@dataclass(frozen=True)
class SubscriptionSnapshot:
    """
    Read-only copy of a stored subscription.

    price — целое число в минимальных единицах валюты (>= 0)
    end=None — подписка без даты окончания (активна до текущего месяца)
    """
    id: UUID
    user_id: UUID
    service_name: str
    price: int
    start: Month
    end: Month | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def interval(self) -> MonthInterval:
        return MonthInterval(self.start, self.end)


@dataclass(frozen=True)
class QueryWindow:
    """
    (user, optional service filter, optional [start, end] months).

    start=None — unbounded past; end=None — unbounded future for listing,
    the current month for cost sums.
    """
    user_id: UUID
    service_name: str | None = None
    start: Month | None = None
    end: Month | None = None

    @property
    def is_empty(self) -> bool:
        """Inverted bounds match nothing (not an error)."""
        return self.start is not None and self.end is not None and self.start > self.end

    def with_end(self, end: Month) -> "QueryWindow":
        return QueryWindow(self.user_id, self.service_name, self.start, end)
