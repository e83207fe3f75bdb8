"""Reader/writer lookup by dialect or export target."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple, Type, Union

from models.contact import ContactRecord
from models.log_types import Dialect, ExportTarget, normalize_dialect, normalize_target

from ...exceptions import UnknownDialectError
from .adif import AdifReader, PotaAdifWriter, WwffAdifWriter
from .base import ExportResult, ImportOptions, ImportResult, LogReader, LogWriter, RowError
from .hamlog import HamlogIosReader, HamlogReader
from .sota_csv import SotaCsvReader, SotaCsvWriter

READERS: Dict[Dialect, Type[LogReader]] = {
    Dialect.HAMLOG: HamlogReader,
    Dialect.HAMLOG_IOS: HamlogIosReader,
    Dialect.ADIF: AdifReader,
    Dialect.SOTA_CSV: SotaCsvReader,
}

WRITERS: Dict[ExportTarget, Type[LogWriter]] = {
    ExportTarget.SOTA_CSV: SotaCsvWriter,
    ExportTarget.POTA_ADIF: PotaAdifWriter,
    ExportTarget.WWFF_ADIF: WwffAdifWriter,
}


def get_reader(dialect: Union[Dialect, str]) -> LogReader:
    try:
        key = dialect if isinstance(dialect, Dialect) else normalize_dialect(dialect)
    except ValueError as e:
        raise UnknownDialectError(str(e)) from e
    return READERS[key]()


def get_writer(target: Union[ExportTarget, str], **options) -> LogWriter:
    """``options`` are passed to the writer (``program_id``, ``program_version``)."""
    try:
        key = target if isinstance(target, ExportTarget) else normalize_target(target)
    except ValueError as e:
        raise UnknownDialectError(str(e)) from e
    return WRITERS[key](**options)


def import_log(text: str, dialect: Union[Dialect, str], options: Optional[ImportOptions] = None) -> ImportResult:
    return get_reader(dialect).read(text, options)


def export_log(records: Sequence[ContactRecord], target: Union[ExportTarget, str], **options) -> ExportResult:
    return get_writer(target, **options).write(records)


def export_files(
    records: Sequence[ContactRecord], target: Union[ExportTarget, str], **options
) -> Tuple[Dict[str, str], List[RowError]]:
    return get_writer(target, **options).write_files(records)
