"""Readers for HAMLOG (Windows) and HamLog (iOS) CSV exports.

HAMLOG columns:
    0 call, 1 date (YY/MM/DD), 2 time (HH:MM + U/Z for UTC, J or nothing
    for local), 3 his RST, 4 my RST, 5 freq, 6 mode, 7 code, 8 GL, 9 QSL,
    10 name, 11 QTH, 12 remarks1, 13 remarks2, ...
HamLog iOS columns:
    0 "YYYY-MM-DD HH:MM:SS +ZZZZ", 2 freq, 3 call, 4 my RST, 5 his RST,
    6 GL, 7 name, 8 QTH, 11 mode, 13 remarks2, 14.. QSL; 19 or more columns.
"""

from __future__ import annotations

import csv
import io
import re
from datetime import datetime, timedelta, timezone
from typing import Iterator, List, Optional, Tuple

from models.contact import ContactRecord
from models.log_types import Dialect
from models.modes import canonical_mode
from utils.bandplan import freq_to_band, parse_freq

from ...exceptions import ConversionError
from .base import ImportOptions, LogReader, his_references, my_references
from .refs import get_ref

HAMLOG_MIN_COLUMNS = 15
IOS_MIN_COLUMNS = 19

HAMLOG_DATE_RE = re.compile(r"(\d+)/(\d+)/(\d+)")
HAMLOG_TIME_RE = re.compile(r"(\d{2}):(\d{2})(\w)?")
IOS_DATETIME_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2}) ([+-])(\d{2})(\d{2})")


def csv_rows(text: str) -> Iterator[Tuple[int, List[str]]]:
    reader = csv.reader(io.StringIO(text))
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        yield reader.line_num, row


def _frequency(raw: str):
    freq = parse_freq(raw)
    if freq is None:
        raise ConversionError(f"Invalid frequency: {raw!r}")
    band = freq_to_band(freq)
    if band is None:
        raise ConversionError(f"Frequency out of range: {raw}")
    return freq, band


def _grid(gl: str, *remarks: str) -> Optional[str]:
    if gl.strip():
        return gl.strip()
    for text in remarks:
        found = get_ref(text).grid
        if found:
            return found
    return None


def _remarks(*parts: str) -> Optional[str]:
    text = " ".join(p.strip() for p in parts if p and p.strip())
    return text or None


def _call(raw: str) -> str:
    call = raw.strip().upper()
    if not call:
        raise ConversionError("Missing callsign")
    return call


def decode_hamlog(cols: List[str], options: ImportOptions) -> ContactRecord:
    if len(cols) < HAMLOG_MIN_COLUMNS:
        raise ConversionError(f"Not a HAMLOG row: {len(cols)} columns (need {HAMLOG_MIN_COLUMNS})")
    call = _call(cols[0])

    m = HAMLOG_DATE_RE.search(cols[1])
    if not m:
        raise ConversionError(f"Invalid date: {cols[1]!r}")
    year = int(m.group(1))
    if len(m.group(1)) <= 2:
        year += 1900 if year >= 65 else 2000

    t = HAMLOG_TIME_RE.search(cols[2])
    if not t:
        raise ConversionError(f"Invalid time: {cols[2]!r}")
    flag = (t.group(3) or "").upper()
    offset = 0 if flag in ("U", "Z") else options.local_offset_minutes
    try:
        local = datetime(year, int(m.group(2)), int(m.group(3)), int(t.group(1)), int(t.group(2)))
    except ValueError as e:
        raise ConversionError(f"Invalid date/time {cols[1]} {cols[2]}: {e}")
    when = (local - timedelta(minutes=offset)).replace(tzinfo=timezone.utc)

    freq, band = _frequency(cols[5])
    remarks1, remarks2 = cols[12], cols[13]
    return ContactRecord(
        time=when,
        his_callsign=call,
        my_callsign=options.my_callsign.upper(),
        mode=canonical_mode(cols[6].strip()) or None,
        frequency=freq,
        band=band,
        my_reference=my_references(options, remarks1, remarks2),
        his_reference=his_references(options, remarks1, remarks2, cols[11]),
        rst_sent=cols[3].strip() or None,
        rst_received=cols[4].strip() or None,
        comment=_grid(cols[8], remarks1, remarks2),
        remarks=_remarks(remarks1, remarks2),
    )


def is_ios_row(cols: List[str]) -> bool:
    return len(cols) >= IOS_MIN_COLUMNS and IOS_DATETIME_RE.search(cols[0]) is not None


def decode_hamlog_ios(cols: List[str], options: ImportOptions) -> ContactRecord:
    if len(cols) < IOS_MIN_COLUMNS:
        raise ConversionError(f"Too short columns: {len(cols)} < {IOS_MIN_COLUMNS}")
    m = IOS_DATETIME_RE.search(cols[0])
    if not m:
        raise ConversionError(f"Invalid date/time: {cols[0]!r}")
    y, mo, d, hh, mm, ss, sign, oh, om = m.groups()
    offset = int(oh) * 60 + int(om)
    if sign == "-":
        offset = -offset
    try:
        local = datetime(int(y), int(mo), int(d), int(hh), int(mm), int(ss))
    except ValueError as e:
        raise ConversionError(f"Invalid date/time {cols[0]}: {e}")
    when = (local - timedelta(minutes=offset)).replace(tzinfo=timezone.utc)

    call = _call(cols[3])
    freq, band = _frequency(cols[2])
    # iOS has no separate remarks1; QTH doubles as the first remarks field
    remarks1, remarks2 = cols[8], cols[13]
    return ContactRecord(
        time=when,
        his_callsign=call,
        my_callsign=options.my_callsign.upper(),
        mode=canonical_mode(cols[11].strip()) or None,
        frequency=freq,
        band=band,
        my_reference=my_references(options, remarks1, remarks2),
        his_reference=his_references(options, remarks1, remarks2, cols[8]),
        rst_sent=cols[5].strip() or None,
        rst_received=cols[4].strip() or None,
        comment=_grid(cols[6], remarks2),
        remarks=_remarks(remarks2),
    )


class HamlogReader(LogReader):
    """HAMLOG CSV; rows that look like HamLog iOS are decoded as such."""

    dialect = Dialect.HAMLOG

    def rows(self, text: str):
        return csv_rows(text)

    def decode(self, row: List[str], options: ImportOptions) -> Optional[ContactRecord]:
        if row and "TimeOn" in row[0]:
            return None
        if is_ios_row(row):
            return decode_hamlog_ios(row, options)
        return decode_hamlog(row, options)


class HamlogIosReader(LogReader):
    dialect = Dialect.HAMLOG_IOS

    def rows(self, text: str):
        return csv_rows(text)

    def decode(self, row: List[str], options: ImportOptions) -> Optional[ContactRecord]:
        if row and "TimeOn" in row[0]:
            return None
        return decode_hamlog_ios(row, options)
