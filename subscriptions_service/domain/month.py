"""
Month-granularity time model.

Все даты в сервисе усечены до месяца: Month — единственная гранулярность.

- Month: (year, month) с целочисленным индексом year * 12 + (month - 1)
- MonthInterval: [start, end] включительно, end=None — подписка активна до сих пор
- expand_interval: разворачивает интервал в последовательность месяцев
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterator


MONTH_TEXT_FORMAT = "MM-YYYY"


@dataclass(frozen=True, order=True)
class Month:
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"year must be in 1..9999, got {self.year}")

    @classmethod
    def from_date(cls, d: date) -> "Month":
        """Truncate a date (or datetime) to its month."""
        return cls(d.year, d.month)

    @classmethod
    def from_index(cls, index: int) -> "Month":
        year, month0 = divmod(index, 12)
        return cls(year, month0 + 1)

    @classmethod
    def parse(cls, text: str) -> "Month":
        """
        Parse "MM-YYYY" (e.g. "01-2025").

        Raises:
            ValueError: если строка не в формате MM-YYYY
        """
        if len(text) != 7 or text[2] != "-":
            raise ValueError(f"expected {MONTH_TEXT_FORMAT}, got {text!r}")
        month_part, year_part = text[:2], text[3:]
        if not (month_part.isdigit() and year_part.isdigit()):
            raise ValueError(f"expected {MONTH_TEXT_FORMAT}, got {text!r}")
        return cls(int(year_part), int(month_part))

    @property
    def index(self) -> int:
        return self.year * 12 + (self.month - 1)

    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def __str__(self) -> str:
        return f"{self.month:02d}-{self.year:04d}"


def month_range(start: Month, end: Month) -> Iterator[Month]:
    """Ascending inclusive months start..end (nothing if start > end)."""
    for index in range(start.index, end.index + 1):
        yield Month.from_index(index)


@dataclass(frozen=True)
class MonthInterval:
    """Active span of a subscription. end=None means open-ended (ongoing)."""
    start: Month
    end: Month | None = None

    def resolve_end(self, as_of: Month) -> Month:
        return self.end if self.end is not None else as_of


def expand_interval(
    interval: MonthInterval,
    as_of: Month,
    lower: Month | None = None,
    upper: Month | None = None,
) -> list[Month]:
    """
    Expand an interval into the calendar months it covers.

    Open end resolves to ``as_of``. ``lower``/``upper`` clip the result to a
    query window (None = unbounded on that side). Work is proportional to
    the number of months produced; an inverted range gives [].
    """
    first = interval.start
    last = interval.resolve_end(as_of)
    if lower is not None and lower > first:
        first = lower
    if upper is not None and upper < last:
        last = upper
    return list(month_range(first, last))
