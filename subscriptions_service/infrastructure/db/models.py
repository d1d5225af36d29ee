"""
SQLAlchemy ORM models
"""
import uuid
from datetime import date as date_type, datetime
from sqlalchemy import String, Integer, TIMESTAMP, Date, Uuid, func, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from subscriptions_service.infrastructure.db.session import Base


class SubscriptionModel(Base):
    """
    Recurring subscription of a user to a service.

    start_date / end_date всегда хранятся как 1-е число месяца.
    end_date = NULL — подписка активна до текущего месяца.
    """
    __tablename__ = "subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    service_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)  # minor currency units

    start_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    end_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)  # inclusive

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        Index('ix_subscriptions_user_service', 'user_id', 'service_name'),
        CheckConstraint('price >= 0', name='ck_subscriptions_price_non_negative'),
        CheckConstraint('end_date IS NULL OR end_date >= start_date', name='ck_subscriptions_date_range'),
    )
