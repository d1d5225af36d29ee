"""
FastAPI dependencies (DB session, clock)
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from subscriptions_service.application.clock import Clock, SystemClock
from subscriptions_service.config import get_settings
from subscriptions_service.infrastructure.db.repository import SubscriptionRepository
from subscriptions_service.infrastructure.db.session import get_db as _get_db


# Re-export get_db для удобства
get_db = _get_db


def get_clock() -> Clock:
    """
    Часы для определения текущего месяца (TIMEZONE из настроек)

    В тестах переопределяется через app.dependency_overrides[get_clock].
    """
    return SystemClock(get_settings().TIMEZONE)


def get_repository(db: Session = Depends(_get_db)) -> SubscriptionRepository:
    return SubscriptionRepository(db)
