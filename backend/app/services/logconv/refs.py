import re
from dataclasses import dataclass, field
from typing import List, Optional

WWFF_REF_RE = re.compile(r"([A-Z0-9]+FF-\d+)", re.IGNORECASE)
POTA_REF_RE = re.compile(r"([a-zA-Z0-9]+-\d{4})")
SOTA_REF_RE = re.compile(r"(([a-zA-Z0-9]+/[a-zA-Z0-9]+)-\d+)")
GRID_RE = re.compile(r"([a-zA-Z]{2}\d{2}[a-zA-Z]{2})")
_SPLIT_RE = re.compile(r"[,\s]+")


@dataclass
class RefInfo:
    sota: Optional[str] = None
    pota: List[str] = field(default_factory=list)
    wwff: List[str] = field(default_factory=list)
    grid: Optional[str] = None
    rest: str = ""  # words that are not references


def get_ref(text: str) -> RefInfo:
    """Pull program references and a grid locator out of free-form remarks.

    Words are split on commas and whitespace, e.g. ``JA/TK-001 JAFF-0123 PM95vq``.
    """
    info = RefInfo()
    rest: List[str] = []
    for part in _SPLIT_RE.split(text or ""):
        if not part:
            continue
        m = WWFF_REF_RE.search(part)
        if m:
            info.wwff.append(m.group(1).upper())
            continue
        m = POTA_REF_RE.search(part)
        if m and "/" not in part:
            info.pota.append(m.group(1).upper())
            continue
        m = SOTA_REF_RE.search(part)
        if m:
            info.sota = m.group(1).upper()
            continue
        m = GRID_RE.search(part)
        if m:
            info.grid = m.group(1)
            continue
        rest.append(part)
    info.rest = " ".join(rest)
    return info
