"""
Validation utilities
"""
from uuid import UUID

from subscriptions_service.domain.errors import SubscriptionValidationError
from subscriptions_service.domain.month import Month, MONTH_TEXT_FORMAT


def parse_month_text(value: str, field: str = "date") -> Month:
    """
    Распарсить месяц в формате MM-YYYY (первое число месяца)

    Args:
        value: Строка вида "01-2025"
        field: Имя поля для сообщения об ошибке

    Returns:
        Month

    Raises:
        SubscriptionValidationError: если формат неверный

    Example:
        >>> parse_month_text("07-2025")
        Month(year=2025, month=7)
        >>> parse_month_text("2025-07", "start_date")
        SubscriptionValidationError: invalid start_date: expected MM-YYYY
    """
    try:
        return Month.parse(value.strip())
    except (ValueError, AttributeError):
        raise SubscriptionValidationError(f"invalid {field}: expected {MONTH_TEXT_FORMAT}")


def parse_optional_month_text(value: str | None, field: str = "date") -> Month | None:
    """Пустая строка и None означают "граница не задана" """
    if value is None or value.strip() == "":
        return None
    return parse_month_text(value, field)


def parse_user_id(value: str | UUID | None) -> UUID:
    """
    Валидация user_id (UUID)

    Raises:
        SubscriptionValidationError: если user_id отсутствует или не UUID
    """
    if isinstance(value, UUID):
        return value
    if not value:
        raise SubscriptionValidationError("invalid user_id")
    try:
        return UUID(value.strip())
    except ValueError:
        raise SubscriptionValidationError("invalid user_id")


def normalize_service_name(value: str | None) -> str:
    """
    Название сервиса: обрезать пробелы, не пустое. Регистр сохраняется.
    """
    name = (value or "").strip()
    if not name:
        raise SubscriptionValidationError("service_name must not be empty")
    return name


def validate_price(value: int) -> int:
    """Цена в минимальных единицах валюты, целое >= 0"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise SubscriptionValidationError("price must be an integer")
    if value < 0:
        raise SubscriptionValidationError("price must be >= 0")
    return value


def validate_month_range(start: Month, end: Month | None) -> None:
    if end is not None and end < start:
        raise SubscriptionValidationError("end_date must be >= start_date")
