"""
Time Breakdown Context

Describes the calendar range a breakdown over time is enumerated on.
The core only consumes the number of steps and synthesizes one pseudo
item per step; bucket boundaries are computed with polars date ranges.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import polars as pl
import structlog

from multidim.config import get_settings
from .models import DimensionItem

logger = structlog.get_logger(__name__)
settings = get_settings()

NOW = "NOW"

DateOrNow = Union[date, datetime, str]


class Granularity(str, Enum):
    """Width of one time step"""
    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"
    QUARTER = "Quarter"
    YEAR = "Year"

    @property
    def interval(self) -> str:
        """polars duration string for this granularity"""
        return {
            Granularity.DAY: "1d",
            Granularity.WEEK: "1w",
            Granularity.MONTH: "1mo",
            Granularity.QUARTER: "1q",
            Granularity.YEAR: "1y",
        }[self]


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _start_of_month(day: date) -> date:
    return day.replace(day=1)


def _add_months(day: date, months: int) -> date:
    total = day.month - 1 + months
    return date(day.year + total // 12, total % 12 + 1, 1)


def _materialize(value: DateOrNow) -> date:
    if isinstance(value, str):
        if value != NOW:
            return datetime.fromisoformat(value).date()
        return _today()
    if isinstance(value, datetime):
        return value.date()
    return value


class TimeContext:
    """
    Calendar range split into steps of one granularity.

    NOW markers are materialized once at construction so the context
    returns the same results throughout its lifetime; the values passed
    in are kept for serialisation.

    Example:
        ctx = TimeContext(start=date(2024, 1, 1), end=date(2025, 1, 1))
        ctx.number_of_steps()  # 12
    """

    def __init__(
        self,
        start: Optional[DateOrNow] = None,
        end: Optional[DateOrNow] = None,
        granularity: Optional[Union[Granularity, str]] = None,
    ):
        default_start = _start_of_month(_today())
        self.start: DateOrNow = start if start is not None else default_start
        self.end: DateOrNow = (
            end if end is not None
            else _add_months(default_start, settings.time.default_horizon_months)
        )
        try:
            self.granularity = Granularity(granularity or settings.time.default_granularity)
        except ValueError:
            raise ValueError(
                f"Unknown granularity: {granularity}. "
                f"Valid values are: {', '.join(g.value for g in Granularity)}"
            )

        # Derived, not serialised
        self._start_date = _materialize(self.start)
        self._end_date = _materialize(self.end)
        self._steps: Optional[List[date]] = None

    def step_starts(self) -> List[date]:
        """First day of every step in [start, end)"""
        if self._steps is None:
            if self._start_date >= self._end_date:
                self._steps = []
            else:
                self._steps = pl.date_range(
                    self._start_date,
                    self._end_date,
                    interval=self.granularity.interval,
                    closed="left",
                    eager=True,
                ).to_list()
            logger.debug(
                "Time steps computed",
                granularity=self.granularity.value,
                steps=len(self._steps),
            )
        return self._steps

    def number_of_steps(self) -> int:
        return len(self.step_starts())

    def items(self) -> List[DimensionItem]:
        """Synthesized integer-indexed pseudo items, one per step"""
        return [
            DimensionItem(id=str(index), name=step.isoformat())
            for index, step in enumerate(self.step_starts())
        ]

    @property
    def dimension_id(self) -> str:
        return settings.dimensions.time_dimension_id

    def to_dict(self) -> Dict[str, Any]:
        """Serialisable form; NOW markers are kept as given"""
        def encode(value: DateOrNow) -> str:
            return value if isinstance(value, str) else value.isoformat()

        return {
            "start": encode(self.start),
            "end": encode(self.end),
            "granularity": self.granularity.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeContext":
        return cls(
            start=data.get("start"),
            end=data.get("end"),
            granularity=data.get("granularity"),
        )

    def __repr__(self) -> str:
        return (
            f"TimeContext(start={self._start_date}, end={self._end_date}, "
            f"granularity={self.granularity.value})"
        )
