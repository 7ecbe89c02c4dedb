from __future__ import annotations
import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator, model_validator


def now_local() -> datetime.datetime:
    """Current local time, timezone-aware, at whole-second precision."""
    return datetime.datetime.now().astimezone().replace(microsecond=0)


class WorkRecord(BaseModel):
    """One tracked work session.

    ``end`` stays ``None`` while the session is open. Records are frozen;
    closing one yields a new value via :meth:`close`.
    """

    model_config = ConfigDict(frozen=True)

    start: datetime.datetime
    end: Optional[datetime.datetime] = None
    objective: str = ""

    @field_validator("start", "end")
    @classmethod
    def _aware_whole_seconds(cls, v):
        if v is None:
            return v
        if v.tzinfo is None:
            v = v.astimezone()
        return v.replace(microsecond=0)

    @model_validator(mode="after")
    def _end_not_before_start(self):
        if self.end is not None and self.end < self.start:
            raise ValueError("end must not be earlier than start")
        return self

    @property
    def is_open(self) -> bool:
        return self.end is None

    def close(
        self, end: datetime.datetime, objective: Optional[str] = None
    ) -> "WorkRecord":
        if end.tzinfo is None:
            end = end.astimezone()
        # end never precedes start
        end = max(end.replace(microsecond=0), self.start)
        update = {"end": end}
        if objective:
            update["objective"] = objective
        return WorkRecord(**{**self.model_dump(), **update})

    def duration(self, now: Optional[datetime.datetime] = None) -> datetime.timedelta:
        end = self.end or now or now_local()
        return end - self.start
