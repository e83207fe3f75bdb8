import os
from typing import Iterable

ADIF_VERSION = "3.1.4"
PROGRAMID = "FLE_LOGBOOK"
PROGRAMVERSION = "0.1.0"


def _hdr_line(tag: str, val: str) -> str:
    return f"<{tag}:{len(val)}>{val}\n"


def build_header(program_id: str = PROGRAMID, program_version: str = PROGRAMVERSION) -> str:
    """ADI header. No timestamp is written so identical input gives identical output."""
    header = ["ADIF export from FLE logbook\n"]
    header.append(_hdr_line("ADIF_VER", ADIF_VERSION))
    header.append(_hdr_line("PROGRAMID", program_id))
    header.append(_hdr_line("PROGRAMVERSION", program_version))
    header.append("<EOH>\n")
    return "".join(header)


def _encode_field(tag: str, value: str) -> str:
    return f"<{tag}:{len(value)}>{value}"


def encode_record(fields: Iterable[tuple[str, str]]) -> str:
    """Encode one record terminated by <EOR>. ADI is ASCII only."""
    rec = []
    for tag, val in fields:
        if not isinstance(tag, str) or not isinstance(val, str):
            raise ValueError(f"ADIF field must be strings: {tag}={val}")
        try:
            val.encode("ascii", errors="strict")
        except UnicodeEncodeError:
            raise ValueError(f"Invalid characters in ADIF field {tag} (ASCII required): {val!r}")
        rec.append(_encode_field(tag, val))
    rec.append("<EOR>\n")
    return "".join(rec)


def write_document(path: str, text: str, encoding: str = "utf-8") -> None:
    """Write an export file atomically (temp file + rename)."""
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        tmp = path + ".tmp"
        try:
            with open(tmp, "w", encoding=encoding, errors="strict", newline="") as f:
                f.write(text)
            os.replace(tmp, path)
        except Exception:
            # Clean up temp file if write failed
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
    except PermissionError:
        raise PermissionError(f"Permission denied writing export file: {path}")
    except OSError as e:
        if "No space left on device" in str(e):
            raise OSError(f"Disk full - cannot write export file: {path}")
        raise OSError(f"Error writing export file {path}: {e}")
