import re
from typing import Tuple

CALLSIGN_RE = re.compile(r"^(?:[A-Z]{1,3}|[0-9][A-Z]{1,2})[0-9][A-Z0-9]*[A-Z]$")
PORTABLE_CALL_RE = re.compile(r"^[A-Z0-9]+/[A-Z0-9]+(/[A-Z0-9]+)?$")


def is_callsign(text: str) -> bool:
    """Plain calls (JA1ABC) and portable forms (JA1ABC/P, JA/JA1ABC/P)."""
    call = text.upper()
    if CALLSIGN_RE.match(call):
        return True
    if PORTABLE_CALL_RE.match(call):
        return any(CALLSIGN_RE.match(part) for part in call.split("/"))
    return False


def call_to_operator(call: str) -> str:
    """Reduce a callsign to the operator: JA/JH1ABC/P -> JH1ABC, JH1ABC/P -> JH1ABC."""
    return split_callsign(call)[0]


def split_callsign(call: str) -> Tuple[str, str]:
    """Split into (operator, portable designator)."""
    call = (call or "").strip().upper()
    parts = call.split("/")
    if len(parts) == 3:
        if parts[1][:1].isdigit():
            # JL1NIE/7/P
            return parts[0], f"{parts[1]}/{parts[2]}"
        # JA/JL1NIE/P
        return parts[1], parts[0]
    if len(parts) == 2:
        first, second = parts
        if second[:1].isdigit() or second == "QRP":
            return first, second
        if len(second) > len(first):
            # prefix form, e.g. JD1/JA1ABC
            return second, first
        return first, second
    return call, ""
