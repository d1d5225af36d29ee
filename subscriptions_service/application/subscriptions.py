"""
Subscription use cases — CRUD подписок + листинг и расчёт суммарной стоимости.

CRUD работает напрямую с ORM. Запросы (list / sum / monthly) получают
сборщик кандидатов и часы через конструктор и сами не хранят состояния.
"""
import logging
from typing import Protocol
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from subscriptions_service.application.clock import Clock
from subscriptions_service.domain.billing import (
    MonthlyCostEntry, aggregate_monthly_costs, monthly_cost_entries, summarize_window,
)
from subscriptions_service.domain.errors import (
    SubscriptionNotFoundError, SubscriptionStorageError, SubscriptionValidationError,
)
from subscriptions_service.domain.listing import filter_candidates, paginate
from subscriptions_service.domain.month import Month
from subscriptions_service.domain.subscription import QueryWindow, SubscriptionSnapshot
from subscriptions_service.infrastructure.db.models import SubscriptionModel
from subscriptions_service.infrastructure.db.repository import to_snapshot
from subscriptions_service.utils.validation import (
    normalize_service_name, validate_month_range, validate_price,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"service_name", "price", "start", "end"})


class CandidateFetcher(Protocol):
    def fetch_candidates(self, window: QueryWindow) -> list[SubscriptionSnapshot]:
        ...


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to %s subscription", action)
        raise SubscriptionStorageError(f"failed to {action} subscription") from exc


def _load(db: Session, sub_id: UUID) -> SubscriptionModel:
    try:
        sub = db.get(SubscriptionModel, sub_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to load subscription id=%s", sub_id)
        raise SubscriptionStorageError(f"failed to load subscription {sub_id}") from exc
    if not sub:
        raise SubscriptionNotFoundError("subscription not found")
    return sub


# ============================================================================
# Subscriptions CRUD
# ============================================================================


class CreateSubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: UUID,
        service_name: str,
        price: int,
        start: Month,
        end: Month | None = None,
    ) -> SubscriptionSnapshot:
        name = normalize_service_name(service_name)
        validate_price(price)
        validate_month_range(start, end)

        sub = SubscriptionModel(
            user_id=user_id,
            service_name=name,
            price=price,
            start_date=start.first_day(),
            end_date=end.first_day() if end is not None else None,
        )
        self.db.add(sub)
        _commit(self.db, "create")
        logger.info(
            "Subscription created id=%s user_id=%s service=%s price=%d",
            sub.id, user_id, name, price,
        )
        return to_snapshot(sub)


class GetSubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, sub_id: UUID) -> SubscriptionSnapshot:
        return to_snapshot(_load(self.db, sub_id))


class UpdateSubscriptionUseCase:
    """Изменяет service_name / price / start / end. id, user_id и created_at не меняются."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, sub_id: UUID, **changes) -> SubscriptionSnapshot:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise SubscriptionValidationError(
                f"fields cannot be updated: {', '.join(sorted(unknown))}"
            )

        sub = _load(self.db, sub_id)

        start = changes.get("start", Month.from_date(sub.start_date))
        if "end" in changes:
            end = changes["end"]
        else:
            end = Month.from_date(sub.end_date) if sub.end_date is not None else None
        validate_month_range(start, end)

        if "service_name" in changes:
            sub.service_name = normalize_service_name(changes["service_name"])
        if "price" in changes:
            sub.price = validate_price(changes["price"])
        sub.start_date = start.first_day()
        sub.end_date = end.first_day() if end is not None else None

        _commit(self.db, "update")
        logger.info("Subscription updated id=%s fields=%s", sub_id, sorted(changes))
        return to_snapshot(sub)


class DeleteSubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, sub_id: UUID) -> SubscriptionSnapshot:
        sub = _load(self.db, sub_id)
        deleted = to_snapshot(sub)
        self.db.delete(sub)
        _commit(self.db, "delete")
        logger.info("Subscription deleted id=%s service=%s", sub_id, deleted.service_name)
        return deleted


# ============================================================================
# Queries
# ============================================================================


class ListSubscriptionsUseCase:
    """Подписки пользователя, пересекающиеся с окном, одна страница."""

    def __init__(self, fetcher: CandidateFetcher):
        self.fetcher = fetcher

    def execute(
        self,
        window: QueryWindow,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[SubscriptionSnapshot]:
        candidates = filter_candidates(self.fetcher.fetch_candidates(window), window)
        return paginate(candidates, limit, offset)


class _CostQuery:
    def __init__(self, fetcher: CandidateFetcher, clock: Clock):
        self.fetcher = fetcher
        self.clock = clock

    def _monthly_costs(self, window: QueryWindow) -> dict[Month, int]:
        as_of = self.clock.current_month()
        if window.end is None:
            window = window.with_end(as_of)
        candidates = filter_candidates(self.fetcher.fetch_candidates(window), window)
        return aggregate_monthly_costs(candidates, as_of, window.start, window.end)


class SumSubscriptionsUseCase(_CostQuery):
    """
    Total paid over the window.

    Absent window end = current month. Pagination never applies here:
    the total covers every matching subscription.
    """

    def execute(self, window: QueryWindow) -> int:
        total = summarize_window(self._monthly_costs(window))
        logger.debug("Subscriptions sum user_id=%s total=%d", window.user_id, total)
        return total


class MonthlyCostsUseCase(_CostQuery):
    """Per-month breakdown of the same computation as SumSubscriptionsUseCase."""

    def execute(self, window: QueryWindow) -> list[MonthlyCostEntry]:
        return monthly_cost_entries(self._monthly_costs(window))
