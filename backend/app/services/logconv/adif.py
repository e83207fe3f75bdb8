"""ADIF (ADI) reader and the POTA/WWFF ADIF writers."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from adif_io.adif_reader import iter_records
from adif_io.adif_writer import build_header, encode_record
from models.contact import ContactRecord, References
from models.log_types import Dialect, ExportTarget
from models.modes import mode_from_adif
from utils.bandplan import freq_to_band, lookup_band, parse_freq

from ...exceptions import ConversionError, FormatError
from .base import ImportOptions, LogReader, LogWriter, my_references


def _split_refs(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(p.strip().upper() for p in value.split(",") if p.strip())


def _references(fields: Dict[str, str], prefix: str) -> References:
    """Collect references from SIG/SIG_INFO and the program-specific tags."""
    sota = fields.get(f"{prefix}sota_ref")
    wwff = fields.get(f"{prefix}wwff_ref")
    pota = list(_split_refs(fields.get(f"{prefix}pota_ref")))
    sig = (fields.get(f"{prefix}sig") or "").upper()
    info = fields.get(f"{prefix}sig_info")
    if info:
        if sig == "POTA":
            pota.extend(r for r in _split_refs(info) if r not in pota)
        elif sig == "WWFF":
            wwff = wwff or info
        elif sig == "SOTA" or (not sig and not sota):
            sota = sota or info
    return References(
        sota=sota.upper() if sota else None,
        pota=tuple(pota),
        wwff=wwff.upper() if wwff else None,
    )


def decode_adif(fields: Dict[str, str], options: ImportOptions) -> ContactRecord:
    call = fields.get("call")
    if not call:
        raise ConversionError("Missing CALL field")
    qso_date = fields.get("qso_date")
    if not qso_date:
        raise ConversionError("Missing QSO_DATE field")
    time_on = fields.get("time_on")
    if not time_on:
        raise ConversionError("Missing TIME_ON field")
    if len(qso_date) < 8 or not qso_date[:8].isdigit():
        raise ConversionError(f"Invalid QSO_DATE: {qso_date}")
    if len(time_on) < 4 or not time_on.isdigit():
        raise ConversionError(f"Invalid TIME_ON: {time_on}")
    stamp = qso_date[:8] + time_on[:6].ljust(6, "0")
    try:
        when = datetime.strptime(stamp, "%Y%m%d%H%M%S").replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise ConversionError(f"Invalid QSO_DATE/TIME_ON {qso_date} {time_on}: {e}")

    freq = parse_freq(fields.get("freq", ""))
    band = (fields.get("band") or "").lower() or None
    if band and lookup_band(band) is None:
        band = None
    if band is None and freq is not None:
        band = freq_to_band(freq)

    # SUBMODE carries the name operators use (FT4 rather than MFSK)
    mode = mode_from_adif(fields.get("mode", ""), fields.get("submode", "")) or None
    my_call = fields.get("station_callsign") or fields.get("operator") or options.my_callsign
    my_refs = _references(fields, "my_")
    if my_refs.is_empty() and options.my_ref_source == "user_defined":
        my_refs = my_references(options, "", "")
    return ContactRecord(
        time=when,
        his_callsign=call.upper(),
        my_callsign=(my_call or "").upper(),
        mode=mode,
        frequency=freq,
        band=band,
        my_reference=my_refs,
        his_reference=_references(fields, ""),
        rst_sent=fields.get("rst_sent"),
        rst_received=fields.get("rst_rcvd"),
        contest_sent=fields.get("stx_string") or fields.get("stx"),
        contest_received=fields.get("srx_string") or fields.get("srx"),
        comment=fields.get("comment"),
        remarks=fields.get("notes"),
        qsl_message=fields.get("qslmsg"),
        operator=(fields.get("operator") or "").upper() or None,
    )


class AdifReader(LogReader):
    dialect = Dialect.ADIF

    def rows(self, text: str):
        return iter_records(text)

    def decode(self, row: Dict[str, str], options: ImportOptions) -> Optional[ContactRecord]:
        return decode_adif(row, options)


def _safe(text: str) -> str:
    return text.replace("/", "-")


class _ProgramAdifWriter(LogWriter):
    """One ADIF record per (my reference, his reference) pair."""

    program = ""

    def header(self) -> str:
        return build_header(self.program_id, self.program_version)

    @abstractmethod
    def my_refs(self, record: ContactRecord) -> List[str]:
        """My references for this program, one output file each."""

    @abstractmethod
    def his_refs(self, record: ContactRecord) -> List[str]:
        """His references; each one is paired with every reference of mine."""

    def encode(self, record: ContactRecord) -> List[Tuple[str, str]]:
        mine = self.my_refs(record)
        if not mine:
            raise FormatError(f"{record.his_callsign}: no {self.program} reference for my station")
        if not record.my_callsign:
            raise FormatError(f"{record.his_callsign}: STATION_CALLSIGN is required")
        theirs = self.his_refs(record) or [None]
        date = record.utc.strftime("%Y%m%d")
        out: List[Tuple[str, str]] = []
        for my_ref in mine:
            name = f"{_safe(record.my_callsign)}@{_safe(my_ref)}-{date}.adi"
            for his_ref in theirs:
                try:
                    fields = record.to_adif_fields(
                        my_sig=(self.program, my_ref),
                        sig=(self.program, his_ref) if his_ref else None,
                    )
                    out.append((name, encode_record(fields)))
                except ValueError as e:
                    raise FormatError(str(e)) from e
        return out


class PotaAdifWriter(_ProgramAdifWriter):
    target = ExportTarget.POTA_ADIF
    program = "POTA"

    def my_refs(self, record: ContactRecord) -> List[str]:
        return list(record.my_reference.pota)

    def his_refs(self, record: ContactRecord) -> List[str]:
        return list(record.his_reference.pota)


class WwffAdifWriter(_ProgramAdifWriter):
    target = ExportTarget.WWFF_ADIF
    program = "WWFF"

    def my_refs(self, record: ContactRecord) -> List[str]:
        return [record.my_reference.wwff] if record.my_reference.wwff else []

    def his_refs(self, record: ContactRecord) -> List[str]:
        return [record.his_reference.wwff] if record.his_reference.wwff else []
