"""
Subscription API endpoints
"""
import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from subscriptions_service.api.deps import get_clock, get_db, get_repository
from subscriptions_service.application.clock import Clock
from subscriptions_service.application.subscriptions import (
    CreateSubscriptionUseCase, GetSubscriptionUseCase, UpdateSubscriptionUseCase,
    DeleteSubscriptionUseCase, ListSubscriptionsUseCase, SumSubscriptionsUseCase,
    MonthlyCostsUseCase,
)
from subscriptions_service.domain.errors import (
    SubscriptionNotFoundError, SubscriptionStorageError, SubscriptionValidationError,
)
from subscriptions_service.domain.month import Month
from subscriptions_service.domain.subscription import QueryWindow, SubscriptionSnapshot
from subscriptions_service.infrastructure.db.repository import SubscriptionRepository
from subscriptions_service.utils.validation import (
    parse_month_text, parse_optional_month_text, parse_user_id,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


# === Request/Response models ===

class CreateSubscriptionRequest(BaseModel):
    service_name: str
    price: int = Field(ge=0)  # минимальные единицы валюты
    user_id: UUID
    start_date: str  # MM-YYYY
    end_date: str | None = None  # MM-YYYY, None — бессрочная

    @field_validator("start_date")
    @classmethod
    def validate_start(cls, v: str) -> str:
        return str(parse_month_text(v, "start_date"))

    @field_validator("end_date")
    @classmethod
    def validate_end(cls, v: str | None) -> str | None:
        month = parse_optional_month_text(v, "end_date")
        return str(month) if month is not None else None


class UpdateSubscriptionRequest(BaseModel):
    """Only the fields present in the body are changed; end_date=null clears the end."""
    service_name: str | None = None
    price: int | None = Field(default=None, ge=0)
    start_date: str | None = None
    end_date: str | None = None

    @field_validator("start_date")
    @classmethod
    def validate_start(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return str(parse_month_text(v, "start_date"))

    @field_validator("end_date")
    @classmethod
    def validate_end(cls, v: str | None) -> str | None:
        month = parse_optional_month_text(v, "end_date")
        return str(month) if month is not None else None


class SubscriptionResponse(BaseModel):
    id: UUID
    service_name: str
    price: int
    user_id: UUID
    start_date: str
    end_date: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SumResponse(BaseModel):
    sum: int


class MonthlyCostResponse(BaseModel):
    month: str
    cost: int


# === Helper functions ===

def _to_response(sub: SubscriptionSnapshot) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=sub.id,
        service_name=sub.service_name,
        price=sub.price,
        user_id=sub.user_id,
        start_date=str(sub.start),
        end_date=str(sub.end) if sub.end is not None else None,
        created_at=sub.created_at,
        updated_at=sub.updated_at,
    )


def _http_error(exc: Exception) -> HTTPException:
    """Domain error -> HTTP status"""
    if isinstance(exc, SubscriptionValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, SubscriptionNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def _parse_id(subscription_id: str) -> UUID:
    try:
        return UUID(subscription_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid id")


def _parse_window(
    user_id: str | None,
    service_name: str | None,
    start_date: str | None,
    end_date: str | None,
) -> QueryWindow:
    try:
        return QueryWindow(
            user_id=parse_user_id(user_id),
            service_name=(service_name or "").strip() or None,
            start=parse_optional_month_text(start_date, "start_date"),
            end=parse_optional_month_text(end_date, "end_date"),
        )
    except SubscriptionValidationError as exc:
        raise _http_error(exc)


def _trace_id(request: Request) -> str | None:
    return getattr(request.state, "trace_id", None)


# === Endpoints ===

@router.post("/", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
def create_subscription(
    request: Request,
    req: CreateSubscriptionRequest,
    db: Session = Depends(get_db),
):
    """Создать подписку"""
    try:
        sub = CreateSubscriptionUseCase(db).execute(
            user_id=req.user_id,
            service_name=req.service_name,
            price=req.price,
            start=Month.parse(req.start_date),
            end=Month.parse(req.end_date) if req.end_date else None,
        )
    except (SubscriptionValidationError, SubscriptionStorageError) as exc:
        raise _http_error(exc)

    logger.info("Subscription created via API trace_id=%s id=%s", _trace_id(request), sub.id)
    return _to_response(sub)


@router.get("/list", response_model=list[SubscriptionResponse])
def list_subscriptions(
    user_id: str | None = None,
    service_name: str | None = None,
    start_date: str | None = None,  # MM-YYYY
    end_date: str | None = None,  # MM-YYYY
    limit: int = 10,
    offset: int = 0,
    repo: SubscriptionRepository = Depends(get_repository),
):
    """Список подписок пользователя за период (с пагинацией)"""
    window = _parse_window(user_id, service_name, start_date, end_date)

    try:
        subs = ListSubscriptionsUseCase(repo).execute(window, limit=limit, offset=offset)
    except SubscriptionStorageError as exc:
        raise _http_error(exc)

    return [_to_response(s) for s in subs]


@router.get("/sum", response_model=SumResponse)
def sum_subscriptions(
    user_id: str | None = None,
    service_name: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    repo: SubscriptionRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
):
    """Суммарная стоимость подписок за период (без end_date — по текущий месяц)"""
    window = _parse_window(user_id, service_name, start_date, end_date)

    try:
        total = SumSubscriptionsUseCase(repo, clock).execute(window)
    except SubscriptionStorageError as exc:
        raise _http_error(exc)

    return SumResponse(sum=total)


@router.get("/monthly", response_model=list[MonthlyCostResponse])
def monthly_costs(
    user_id: str | None = None,
    service_name: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    repo: SubscriptionRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
):
    """Помесячная разбивка стоимости (те же правила, что и /sum)"""
    window = _parse_window(user_id, service_name, start_date, end_date)

    try:
        entries = MonthlyCostsUseCase(repo, clock).execute(window)
    except SubscriptionStorageError as exc:
        raise _http_error(exc)

    return [MonthlyCostResponse(month=str(e.month), cost=e.cost) for e in entries]


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
def get_subscription(subscription_id: str, db: Session = Depends(get_db)):
    """Получить подписку по ID"""
    sub_id = _parse_id(subscription_id)

    try:
        sub = GetSubscriptionUseCase(db).execute(sub_id)
    except (SubscriptionNotFoundError, SubscriptionStorageError) as exc:
        raise _http_error(exc)

    return _to_response(sub)


@router.put("/{subscription_id}", response_model=SubscriptionResponse)
def update_subscription(
    request: Request,
    subscription_id: str,
    req: UpdateSubscriptionRequest,
    db: Session = Depends(get_db),
):
    """Обновить подписку (id, user_id и created_at не меняются)"""
    sub_id = _parse_id(subscription_id)

    changes = {}
    fields = req.model_fields_set
    if "service_name" in fields and req.service_name is not None:
        changes["service_name"] = req.service_name
    if "price" in fields and req.price is not None:
        changes["price"] = req.price
    if "start_date" in fields and req.start_date is not None:
        changes["start"] = Month.parse(req.start_date)
    if "end_date" in fields:
        changes["end"] = Month.parse(req.end_date) if req.end_date else None

    try:
        sub = UpdateSubscriptionUseCase(db).execute(sub_id, **changes)
    except (SubscriptionValidationError, SubscriptionNotFoundError, SubscriptionStorageError) as exc:
        raise _http_error(exc)

    logger.info("Subscription updated via API trace_id=%s id=%s", _trace_id(request), sub_id)
    return _to_response(sub)


@router.delete("/{subscription_id}")
def delete_subscription(
    request: Request,
    subscription_id: str,
    db: Session = Depends(get_db),
):
    """Удалить подписку"""
    sub_id = _parse_id(subscription_id)

    try:
        DeleteSubscriptionUseCase(db).execute(sub_id)
    except (SubscriptionNotFoundError, SubscriptionStorageError) as exc:
        raise _http_error(exc)

    logger.info("Subscription deleted via API trace_id=%s id=%s", _trace_id(request), sub_id)
    return {"message": "subscription deleted"}
