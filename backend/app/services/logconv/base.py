"""Reader/writer strategy classes shared by every log dialect."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from adif_io.adif_writer import PROGRAMID, PROGRAMVERSION
from models.contact import ContactRecord, References
from models.log_types import Dialect, ExportTarget

from ...exceptions import ConversionError, FormatError
from .refs import RefInfo, get_ref

logger = logging.getLogger(__name__)


@dataclass
class ImportOptions:
    """Where references live in legacy logs that have no dedicated columns.

    ``my_ref_source``: ``rmks1``, ``rmks2``, ``user_defined`` or ``none``.
    ``his_ref_source``: ``rmks1``, ``rmks2``, ``qth`` or ``none``.
    """

    my_callsign: str = ""
    my_ref_source: str = "user_defined"
    his_ref_source: str = "none"
    summit: Optional[str] = None
    parks: Tuple[str, ...] = ()
    wwff: Optional[str] = None
    local_offset_minutes: int = 540


@dataclass(frozen=True)
class RowError:
    line: int
    message: str


@dataclass
class ImportResult:
    records: List[ContactRecord] = field(default_factory=list)
    errors: List[RowError] = field(default_factory=list)
    skipped: int = 0  # header and blank rows

    @property
    def imported(self) -> int:
        return len(self.records)


@dataclass
class ExportResult:
    text: str = ""
    errors: List[RowError] = field(default_factory=list)
    exported: int = 0


def _refs_from(info: RefInfo) -> References:
    return References(
        sota=info.sota,
        pota=tuple(info.pota),
        wwff=info.wwff[0] if info.wwff else None,
    )


def my_references(options: ImportOptions, remarks1: str, remarks2: str) -> References:
    if options.my_ref_source == "rmks1":
        return _refs_from(get_ref(remarks1))
    if options.my_ref_source == "rmks2":
        return _refs_from(get_ref(remarks2))
    if options.my_ref_source == "user_defined":
        return References(sota=options.summit or None, pota=tuple(options.parks), wwff=options.wwff or None)
    return References()


def his_references(options: ImportOptions, remarks1: str, remarks2: str, qth: str) -> References:
    source = {"rmks1": remarks1, "rmks2": remarks2, "qth": qth}.get(options.his_ref_source)
    if source is None:
        return References()
    return _refs_from(get_ref(source))


class LogReader(ABC):
    """Maps one dialect's rows to contact records, one row at a time."""

    dialect: Dialect

    @abstractmethod
    def rows(self, text: str) -> Iterator[Tuple[int, object]]:
        """Yield (1-based line, raw row)."""

    @abstractmethod
    def decode(self, row, options: ImportOptions) -> Optional[ContactRecord]:
        """Return a record, None for rows to skip silently, or raise ConversionError."""

    def read(self, text: str, options: Optional[ImportOptions] = None) -> ImportResult:
        options = options or ImportOptions()
        result = ImportResult()
        for line, row in self.rows(text):
            try:
                record = self.decode(row, options)
            except ConversionError as e:
                result.errors.append(RowError(line, str(e)))
                continue
            if record is None:
                result.skipped += 1
                continue
            result.records.append(record)
        logger.info(
            "Imported %s log: %d records, %d skipped, %d errors",
            self.dialect.value,
            result.imported,
            result.skipped,
            len(result.errors),
        )
        return result


class LogWriter(ABC):
    """Serializes contact records for one target program in a fixed field order."""

    target: ExportTarget

    def __init__(self, program_id: str = PROGRAMID, program_version: str = PROGRAMVERSION):
        self.program_id = program_id
        self.program_version = program_version

    @abstractmethod
    def header(self) -> str:
        ...

    @abstractmethod
    def encode(self, record: ContactRecord) -> List[Tuple[str, str]]:
        """Return (file name, chunk) pairs for one record, or raise FormatError."""

    def write(self, records: Sequence[ContactRecord]) -> ExportResult:
        result = ExportResult()
        chunks: List[str] = []
        for idx, record in enumerate(records, start=1):
            try:
                chunks.extend(chunk for _, chunk in self.encode(record))
            except FormatError as e:
                result.errors.append(RowError(idx, str(e)))
                continue
            result.exported += 1
        result.text = self.header() + "".join(chunks)
        logger.info(
            "Exported %d records as %s (%d rejected)",
            result.exported,
            self.target.value,
            len(result.errors),
        )
        return result

    def write_files(self, records: Sequence[ContactRecord]) -> Tuple[Dict[str, str], List[RowError]]:
        """Split the export into one document per file name (per reference or date)."""
        files: Dict[str, str] = {}
        errors: List[RowError] = []
        for idx, record in enumerate(records, start=1):
            try:
                pairs = self.encode(record)
            except FormatError as e:
                errors.append(RowError(idx, str(e)))
                continue
            for name, chunk in pairs:
                if name not in files:
                    files[name] = self.header()
                files[name] += chunk
        return files, errors
