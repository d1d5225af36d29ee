"""
Subscription Repository - persistence side of the subscription queries

Выборка кандидатов для листинга и подсчёта суммы выполняется одним SQL-запросом
с тем же предикатом пересечения, что и в domain.listing.matches_window.
"""
import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from subscriptions_service.domain.errors import SubscriptionStorageError
from subscriptions_service.domain.month import Month
from subscriptions_service.domain.subscription import QueryWindow, SubscriptionSnapshot
from subscriptions_service.infrastructure.db.models import SubscriptionModel

logger = logging.getLogger(__name__)


def to_snapshot(model: SubscriptionModel) -> SubscriptionSnapshot:
    """ORM row -> transient snapshot for the core"""
    return SubscriptionSnapshot(
        id=model.id,
        user_id=model.user_id,
        service_name=model.service_name,
        price=model.price,
        start=Month.from_date(model.start_date),
        end=Month.from_date(model.end_date) if model.end_date is not None else None,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class SubscriptionRepository:
    """
    Repository для чтения подписок

    Implements the candidate fetcher used by the list / sum use cases.
    """

    def __init__(self, db: Session):
        self.db = db

    def fetch_candidates(self, window: QueryWindow) -> list[SubscriptionSnapshot]:
        """
        Подписки пользователя, пересекающиеся с окном

        Args:
            window: user_id, service_name (exact match), start/end months

        Returns:
            Snapshots ordered by start month, service name (unpaginated)

        Raises:
            SubscriptionStorageError: при ошибке БД
        """
        if window.is_empty:
            return []

        query = self.db.query(SubscriptionModel).filter(
            SubscriptionModel.user_id == window.user_id,
        )

        if window.service_name is not None:
            query = query.filter(SubscriptionModel.service_name == window.service_name)

        if window.start is not None:
            query = query.filter(or_(
                SubscriptionModel.end_date >= window.start.first_day(),
                SubscriptionModel.end_date.is_(None),
            ))

        if window.end is not None:
            query = query.filter(SubscriptionModel.start_date <= window.end.first_day())

        query = query.order_by(
            SubscriptionModel.start_date.asc(),
            SubscriptionModel.service_name.asc(),
        )

        try:
            rows = query.all()
        except SQLAlchemyError as exc:
            logger.exception("Failed to fetch subscriptions for user_id=%s", window.user_id)
            raise SubscriptionStorageError(
                f"failed to fetch subscriptions for user {window.user_id}"
            ) from exc

        return [to_snapshot(row) for row in rows]
