from enum import Enum


class LogType(str, Enum):
    UNKNOWN = "unknown"
    ACTIVATOR = "activator"
    CHASER = "chaser"


class JudgmentMode(str, Enum):
    STRICT = "strict"  # activation day or the next day alone reaches 10
    LENIENT = "lenient"  # both days combined reach 10


class Dialect(str, Enum):
    HAMLOG = "hamlog"
    HAMLOG_IOS = "hamlog-ios"
    ADIF = "adif"
    SOTA_CSV = "sota-csv"


class ExportTarget(str, Enum):
    SOTA_CSV = "sota-csv"
    POTA_ADIF = "pota-adif"
    WWFF_ADIF = "wwff-adif"


class RstType(str, Enum):
    RST = "rst"  # CW and other keyed modes: 599
    RS = "rs"  # phone: 59
    SNR = "snr"  # WSJT family: -10


DISPLAY_LABELS = {
    Dialect.HAMLOG: "HAMLOG CSV",
    Dialect.HAMLOG_IOS: "HamLog (iOS) CSV",
    Dialect.ADIF: "ADIF",
    Dialect.SOTA_CSV: "SOTA CSV (V2)",
    ExportTarget.POTA_ADIF: "POTA ADIF",
    ExportTarget.WWFF_ADIF: "WWFF ADIF",
}

DIALECT_SYNONYMS = {
    "hamlog": Dialect.HAMLOG,
    "hamlog-csv": Dialect.HAMLOG,
    "turbo-hamlog": Dialect.HAMLOG,
    "hamlog-ios": Dialect.HAMLOG_IOS,
    "hamlog_ios": Dialect.HAMLOG_IOS,
    "ios": Dialect.HAMLOG_IOS,
    "adif": Dialect.ADIF,
    "adi": Dialect.ADIF,
    "sota": Dialect.SOTA_CSV,
    "sota-csv": Dialect.SOTA_CSV,
    "sota_csv": Dialect.SOTA_CSV,
}

TARGET_SYNONYMS = {
    "sota": ExportTarget.SOTA_CSV,
    "sota-csv": ExportTarget.SOTA_CSV,
    "sota_csv": ExportTarget.SOTA_CSV,
    "pota": ExportTarget.POTA_ADIF,
    "pota-adif": ExportTarget.POTA_ADIF,
    "pota_adif": ExportTarget.POTA_ADIF,
    "wwff": ExportTarget.WWFF_ADIF,
    "wwff-adif": ExportTarget.WWFF_ADIF,
    "wwff_adif": ExportTarget.WWFF_ADIF,
}


def _match_label(t: str, candidates):
    for k in candidates:
        label = DISPLAY_LABELS.get(k)
        if label and t == label.lower():
            return k
    return None


def normalize_dialect(value: str) -> Dialect:
    if not value:
        raise ValueError("dialect required")
    t = value.strip().lower()
    if t in DIALECT_SYNONYMS:
        return DIALECT_SYNONYMS[t]
    found = _match_label(t, Dialect)
    if found is None:
        raise ValueError(f"unknown dialect: {value}")
    return found


def normalize_target(value: str) -> ExportTarget:
    if not value:
        raise ValueError("export target required")
    t = value.strip().lower()
    if t in TARGET_SYNONYMS:
        return TARGET_SYNONYMS[t]
    found = _match_label(t, ExportTarget)
    if found is None:
        raise ValueError(f"unknown export target: {value}")
    return found


def normalize_mode(value: str) -> JudgmentMode:
    if not value:
        return JudgmentMode.STRICT
    t = value.strip().lower()
    for m in JudgmentMode:
        if t == m.value:
            return m
    raise ValueError(f"unknown judgment mode: {value}")
