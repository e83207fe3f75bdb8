"""SOTA database CSV (V2) reader and writer.

Row layout:
    V2, my call, my summit, DD/MM/YYYY, HH:MM (or HHMM), band or frequency,
    mode, his call, his summit, notes
Chaser logs carry one column more; anything past the notes is ignored.
"""

from __future__ import annotations

import csv
import io
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from models.contact import ContactRecord, References
from models.log_types import Dialect, ExportTarget
from models.modes import mode_to_sota_mode
from utils.bandplan import band_to_freq, freq_to_band, parse_freq, sota_label_to_band

from ...exceptions import ConversionError, FormatError
from .base import ImportOptions, LogReader, LogWriter
from .hamlog import csv_rows

SOTA_MIN_COLUMNS = 9
SOTA_DATETIME_FORMATS = ("%d/%m/%Y %H:%M", "%d/%m/%Y %H%M")


def parse_sota_datetime(date: str, time: str) -> Optional[datetime]:
    text = f"{date.strip()} {time.strip()}"
    for fmt in SOTA_DATETIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def _band_column(raw: str):
    """``7MHz`` is a band label; ``7.032`` and ``7.032MHz`` are frequencies."""
    text = raw.strip()
    band = sota_label_to_band(text)
    if band:
        return None, band
    if text.lower().endswith("mhz"):
        text = text[:-3]
    freq = parse_freq(text)
    if freq is None:
        return None, None
    return freq, freq_to_band(freq)


def decode_sota_row(cols: List[str], options: ImportOptions) -> ContactRecord:
    if len(cols) < SOTA_MIN_COLUMNS:
        raise ConversionError(f"Not a SOTA CSV row: {len(cols)} columns")
    if cols[0].strip().upper() != "V2":
        raise ConversionError(f"Unsupported SOTA CSV version: {cols[0]!r}")
    when = parse_sota_datetime(cols[3], cols[4])
    if when is None:
        raise ConversionError(f"Invalid date/time: {cols[3]} {cols[4]}")
    his_call = cols[7].strip().upper()
    if not his_call:
        raise ConversionError("Missing callsign")
    freq, band = _band_column(cols[5])
    my_summit = cols[2].strip().upper()
    his_summit = cols[8].strip().upper()
    notes = cols[9].strip() if len(cols) > 9 else ""
    return ContactRecord(
        time=when,
        his_callsign=his_call,
        my_callsign=cols[1].strip().upper() or options.my_callsign.upper(),
        mode=cols[6].strip().upper() or None,
        frequency=freq,
        band=band,
        my_reference=References(sota=my_summit or None),
        his_reference=References(sota=his_summit or None),
        comment=notes or None,
    )


class SotaCsvReader(LogReader):
    dialect = Dialect.SOTA_CSV

    def rows(self, text: str):
        return csv_rows(text)

    def decode(self, row: List[str], options: ImportOptions) -> Optional[ContactRecord]:
        return decode_sota_row(row, options)


class SotaCsvWriter(LogWriter):
    """Activator rows need my summit; chaser rows need his summit."""

    target = ExportTarget.SOTA_CSV

    def header(self) -> str:
        return ""

    def encode(self, record: ContactRecord) -> List[Tuple[str, str]]:
        if not record.my_callsign:
            raise FormatError(f"{record.his_callsign}: my callsign is required")
        if not record.mode:
            raise FormatError(f"{record.his_callsign}: mode is required")
        my_summit = record.my_reference.sota or ""
        his_summit = record.his_reference.sota or ""
        if not (my_summit or his_summit):
            raise FormatError(f"{record.his_callsign}: no SOTA summit reference")
        band = record.effective_band()
        label = band_to_freq(band, sota=True) if band else None
        if not label:
            raise FormatError(f"{record.his_callsign}: band or frequency is required")

        utc = record.utc
        buf = io.StringIO()
        csv.writer(buf, lineterminator="\n").writerow([
            "V2",
            record.my_callsign.upper(),
            my_summit,
            utc.strftime("%d/%m/%Y"),
            utc.strftime("%H:%M"),
            label,
            mode_to_sota_mode(record.mode),
            record.his_callsign.upper(),
            his_summit,
            record.comment or "",
        ])
        return [(f"sota{utc.strftime('%Y%m%d')}.csv", buf.getvalue())]
