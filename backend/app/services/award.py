"""Award judgment for SOTA activator and chaser logs.

Pure functions over in-memory contact records: no I/O happens here. The
CSV entry point parses a SOTA V2 log, detects whether it is an activator
or chaser log, and judges it against an award period.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Set

from models.contact import ContactRecord
from models.log_types import JudgmentMode, LogType

from ..core.config import Settings, get_settings
from .logconv.base import RowError
from .logconv.detect import detect_log_type
from .logconv.sota_csv import SotaCsvReader

logger = logging.getLogger(__name__)

QUALIFYING_STATIONS = 10  # distinct stations for a summit to qualify
ACTIVATION_MIN_STATIONS = 4  # distinct stations that make a day an activation
ACTIVATOR_SUMMITS_REQUIRED = 10
CHASER_ACTIVATORS_REQUIRED = 10


@dataclass(frozen=True)
class AwardPeriod:
    """Half-open UTC range ``[start, end)``."""

    start: datetime
    end: datetime

    def contains(self, when: datetime) -> bool:
        return self.start <= when < self.end

    @classmethod
    def from_dates(cls, start_date: date, end_date: date, utc_offset_minutes: int = 0) -> "AwardPeriod":
        """Build the range for inclusive local dates at the given UTC offset."""
        offset = timedelta(minutes=utc_offset_minutes)
        start = datetime.combine(start_date, time(0, 0), tzinfo=timezone.utc) - offset
        end = datetime.combine(end_date + timedelta(days=1), time(0, 0), tzinfo=timezone.utc) - offset
        return cls(start=start, end=end)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AwardPeriod":
        s = settings or get_settings()
        return cls.from_dates(s.award_start_date, s.award_end_date, s.award_utc_offset_minutes)

    @classmethod
    def default(cls) -> "AwardPeriod":
        # 2025-06-01 .. 2025-12-31 JST
        return cls.from_dates(date(2025, 6, 1), date(2025, 12, 31), 540)


@dataclass
class SummitActivation:
    summit_code: str
    unique_stations: int
    qualified: bool


@dataclass
class ActivatorResult:
    achieved: bool
    qualified_summits: int
    summits: List[SummitActivation] = field(default_factory=list)


@dataclass
class SummitChase:
    summit_code: str
    activators: List[str]

    @property
    def unique_activators(self) -> int:
        return len(self.activators)

    @property
    def achieved(self) -> bool:
        return self.unique_activators >= CHASER_ACTIVATORS_REQUIRED


@dataclass
class ChaserResult:
    achieved: bool
    qualified_summits: List[SummitChase] = field(default_factory=list)


@dataclass
class AwardJudgmentResult:
    callsign: str
    total_qsos: int
    log_type: LogType
    mode: JudgmentMode
    activator: Optional[ActivatorResult] = None
    chaser: Optional[ChaserResult] = None
    success: bool = True
    errors: List[RowError] = field(default_factory=list)


def evaluate_summit_activation(
    summit_code: str, stations_by_date: Dict[date, Set[str]], mode: JudgmentMode
) -> SummitActivation:
    """Judge one summit.

    The activation day is the first UTC date with at least four distinct
    stations; only that day and the next one count. Strict mode needs ten
    stations within one of those days, lenient mode ten across both.
    """
    activation_date = None
    for day in sorted(stations_by_date):
        if len(stations_by_date[day]) >= ACTIVATION_MIN_STATIONS:
            activation_date = day
            break

    if activation_date is None:
        everyone: Set[str] = set()
        for stations in stations_by_date.values():
            everyone |= stations
        return SummitActivation(summit_code, len(everyone), False)

    day1 = stations_by_date.get(activation_date, set())
    day2 = stations_by_date.get(activation_date + timedelta(days=1), set())
    combined = day1 | day2

    if mode == JudgmentMode.STRICT:
        best = max(len(day1), len(day2))
        if best >= QUALIFYING_STATIONS:
            return SummitActivation(summit_code, best, True)
        return SummitActivation(summit_code, len(combined), False)
    return SummitActivation(summit_code, len(combined), len(combined) >= QUALIFYING_STATIONS)


def judge_award(
    records: Sequence[ContactRecord],
    period: AwardPeriod,
    mode: JudgmentMode = JudgmentMode.STRICT,
    log_type: LogType = LogType.UNKNOWN,
) -> AwardJudgmentResult:
    callsign = records[0].my_operator().upper() if records else ""
    total = 0
    activations: Dict[str, Dict[date, Set[str]]] = {}
    chases: Dict[str, Set[str]] = {}

    for rec in records:
        when = rec.utc
        if not period.contains(when):
            continue
        total += 1
        his_op = rec.his_operator().upper()
        if log_type == LogType.ACTIVATOR and rec.my_reference.sota:
            summit = rec.my_reference.sota.upper()
            activations.setdefault(summit, {}).setdefault(when.date(), set()).add(his_op)
        if log_type == LogType.CHASER and rec.his_reference.sota:
            summit = rec.his_reference.sota.upper()
            chases.setdefault(summit, set()).add(his_op)

    result = AwardJudgmentResult(callsign=callsign, total_qsos=total, log_type=log_type, mode=mode)

    if log_type == LogType.ACTIVATOR:
        summits = [evaluate_summit_activation(code, days, mode) for code, days in activations.items()]
        summits.sort(key=lambda s: (-s.unique_stations, s.summit_code))
        qualified = sum(1 for s in summits if s.qualified)
        result.activator = ActivatorResult(
            achieved=qualified >= ACTIVATOR_SUMMITS_REQUIRED,
            qualified_summits=qualified,
            summits=summits,
        )

    if log_type == LogType.CHASER:
        qualifying = [
            SummitChase(code, sorted(activators))
            for code, activators in chases.items()
            if len(activators) >= CHASER_ACTIVATORS_REQUIRED
        ]
        qualifying.sort(key=lambda s: (-s.unique_activators, s.summit_code))
        result.chaser = ChaserResult(achieved=bool(qualifying), qualified_summits=qualifying)

    return result


def judge_award_csv(
    text: str,
    mode: JudgmentMode = JudgmentMode.STRICT,
    period: Optional[AwardPeriod] = None,
) -> AwardJudgmentResult:
    """Detect the log type of a SOTA V2 CSV and judge it.

    Rows that do not parse are left out of every count and returned in
    ``errors``.
    """
    log_type = detect_log_type(text)
    logger.info("Detected log type: %s", log_type.value)
    imported = SotaCsvReader().read(text)
    result = judge_award(imported.records, period or AwardPeriod.from_settings(), mode, log_type)
    result.errors = imported.errors
    logger.info(
        "Award judgment complete: %d QSOs in period, log_type=%s, mode=%s",
        result.total_qsos,
        result.log_type.value,
        result.mode.value,
    )
    return result
