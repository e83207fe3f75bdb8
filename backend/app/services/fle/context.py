from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Optional

from models.contact import References


@dataclass
class OperatorContext:
    """Values set by directives plus the sticky QSO state of one document.

    Owned by a single compile call. The compiler works on a copy per line
    and only keeps the copy when the line compiles cleanly.
    """

    my_callsign: Optional[str] = None
    operator: Optional[str] = None
    my_references: References = field(default_factory=References)
    current_date: Optional[date] = None
    timezone_offset: int = 0  # minutes east of UTC
    qsl_message: Optional[str] = None
    qsl_message2: Optional[str] = None
    nickname: Optional[str] = None
    rigset: int = 0
    contest_serial: Optional[int] = None  # next serial with `number consecutive`
    contest_literal: Optional[str] = None

    # Sticky between QSO lines
    band: Optional[str] = None
    frequency: Optional[Decimal] = None
    mode: Optional[str] = None
    hour: int = 0
    minute: int = 0

    def copy(self) -> "OperatorContext":
        # References is frozen, so a shallow copy is enough
        return dataclasses.replace(self)

    def reset_time(self) -> None:
        self.hour = 0
        self.minute = 0

    def to_utc(self) -> datetime:
        if self.current_date is None:
            raise ValueError("date is not set")
        local = datetime.combine(self.current_date, time(self.hour, self.minute))
        return (local - timedelta(minutes=self.timezone_offset)).replace(tzinfo=timezone.utc)
