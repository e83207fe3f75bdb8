from typing import Dict, List, Tuple

from .log_types import RstType

# Mode -> kind of signal report exchanged
MODE_TABLE: Dict[str, RstType] = {
    "cw": RstType.RST,
    "rtty": RstType.RST,
    "rty": RstType.RST,
    "psk": RstType.RST,
    "psk31": RstType.RST,
    "ssb": RstType.RS,
    "fm": RstType.RS,
    "am": RstType.RS,
    "dv": RstType.RS,
    "fusion": RstType.RS,
    "dstar": RstType.RS,
    "d-star": RstType.RS,
    "dmr": RstType.RS,
    "c4fm": RstType.RS,
    "freedv": RstType.RS,
    "jt9": RstType.SNR,
    "jt65": RstType.SNR,
    "ft8": RstType.SNR,
    "ft4": RstType.SNR,
    "js8": RstType.SNR,
}

DEFAULT_REPORTS = {
    RstType.RST: "599",
    RstType.RS: "59",
    RstType.SNR: "-10",
}

SOTA_MODE_TABLE: List[Tuple[str, List[str]]] = [
    ("CW", ["CW"]),
    ("SSB", ["SSB"]),
    ("FM", ["FM"]),
    ("AM", ["AM"]),
    ("DATA", ["RTTY", "RTY", "PSK", "PSK31", "PSK-31", "DIG", "DATA", "JT9", "JT65", "FT8", "FT4", "FSQ"]),
    ("DV", ["DV", "FUSION", "DSTAR", "D-STAR", "DMR", "C4FM"]),
]

# Spellings folded into one name when a mode is entered
MODE_ALIASES: Dict[str, str] = {
    "D-STAR": "DSTAR",
    "FUSION": "C4FM",
}

ADIF_NORMALIZE: List[Tuple[str, List[str]]] = [
    ("DIGITALVOICE", ["DV"]),
]

# ADIF modes whose common names are really submodes
ADIF_MODE_TABLE: List[Tuple[str, List[str]]] = [
    (
        "MFSK",
        [
            "FSQCALL", "FST4", "FST4W", "FT4", "JS8", "JTMS", "MFSK4", "MFSK8", "MFSK11",
            "MFSK16", "MFSK22", "MFSK31", "MFSK32", "MFSK64", "MFSK64L", "MFSK128",
            "MFSK128L", "Q65",
        ],
    ),
    ("DIGITALVOICE", ["C4FM", "DMR", "DSTAR", "FREEDV", "M17"]),
]


def rst_type_for(mode: str) -> RstType:
    return MODE_TABLE.get((mode or "").lower(), RstType.RST)


def default_report(mode: str) -> str:
    return DEFAULT_REPORTS[rst_type_for(mode)]


def canonical_mode(mode: str) -> str:
    m = (mode or "").upper()
    return MODE_ALIASES.get(m, m)


def mode_to_sota_mode(mode: str) -> str:
    m = (mode or "").upper()
    for sota_mode, names in SOTA_MODE_TABLE:
        if m in names:
            return sota_mode
    return "OTHER"


def mode_to_adif_mode(mode: str) -> Tuple[str, str]:
    """Return (MODE, SUBMODE); SUBMODE is empty when the mode stands alone."""
    m = canonical_mode(mode)
    for normalized, names in ADIF_NORMALIZE:
        if m in names:
            m = normalized
            break
    for parent, submodes in ADIF_MODE_TABLE:
        if m in submodes:
            return parent, m
    return m, ""


def mode_from_adif(mode: str, submode: str = "") -> str:
    """Inverse of mode_to_adif_mode: the name an operator would enter."""
    sub = (submode or "").upper()
    if sub:
        return canonical_mode(sub)
    m = (mode or "").upper()
    for normalized, names in ADIF_NORMALIZE:
        if m == normalized:
            return names[0]
    return canonical_mode(m)
