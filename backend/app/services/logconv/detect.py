import csv
import io

from models.log_types import LogType

ACTIVATOR_COLUMNS = 10
CHASER_COLUMNS = 11


def detect_log_type(text: str) -> LogType:
    """Classify a SOTA CSV by the field count of its first row.

    Only the structure matters: 10 fields is an activator log, 11 a chaser
    log, anything else (including an empty document) is unknown. Quoted
    commas belong to their field, as they do for the CSV reader.
    """
    for row in csv.reader(io.StringIO(text or "")):
        if not row:
            continue
        if len(row) == ACTIVATOR_COLUMNS:
            return LogType.ACTIVATOR
        if len(row) == CHASER_COLUMNS:
            return LogType.CHASER
        return LogType.UNKNOWN
    return LogType.UNKNOWN
