"""Line tokenizer for Fast Log Entry (FLE) text.

Every whitespace-separated word is classified by a fixed priority list.
Classification never fails: anything unrecognised becomes a LITERAL token
and the compiler decides whether it is acceptable where it appears.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from models.modes import MODE_TABLE, canonical_mode
from utils.bandplan import lookup_band
from utils.callsign import is_callsign


class TokenKind(str, Enum):
    DATE = "Date"
    SHORT_DATE = "ShortDate"
    FREQUENCY = "Frequency"
    BAND = "Band"
    SIGNAL_REPORT = "SignalReport"
    WWFF_REF = "WwffRef"
    SOTA_REF = "SotaRef"
    POTA_REF = "PotaRef"
    KEYWORD = "Keyword"
    MODE = "Mode"
    CALL = "Call"
    DECIMAL = "Decimal"
    COMMENT = "Comment"
    CONTEST_SENT = "ContestSent"
    CONTEST_RECEIVED = "ContestReceived"
    LITERAL = "Literal"


class CommentKind(str, Enum):
    ANGLE = "angle"  # <...> QSO comment
    SQUARE = "square"  # [...] QSL message
    CURLY = "curly"  # {...} remarks


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    lexeme: str  # text exactly as written
    line: int
    column: int  # 1-based
    value: str = ""  # normalised form (uppercase call, lowercase keyword, comment body...)
    comment_kind: Optional[CommentKind] = None


KEYWORDS = {
    "mycall",
    "operator",
    "qslmsg",
    "qslmsg2",
    "mywwff",
    "mysota",
    "mypota",
    "nickname",
    "date",
    "day",
    "rigset",
    "timezone",
    "number",
    "consecutive",
}

WHITESPACE = (" ", "\t", "\u3000")
COMMENT_CLOSE = {"<": (">", CommentKind.ANGLE), "[": ("]", CommentKind.SQUARE), "{": ("}", CommentKind.CURLY)}
_WORD_STOP = set(WHITESPACE) | {"#", "<", "[", "{"}

DATE_RE = re.compile(r"^(\d+)[/-](\d+)[/-](\d+)$")
SHORT_DATE_RE = re.compile(r"^(\d+)[/-](\d+)$")
FREQ_RE = re.compile(r"^\d+\.\d+$")
SIGNAL_REPORT_RE = re.compile(r"^[+-]\d+$")
WWFF_RE = re.compile(r"^\w+FF-\d+$")
SOTA_RE = re.compile(r"^\w+/\w+-\d+$")
POTA_RE = re.compile(r"^\w+-\d+$")
DECIMAL_RE = re.compile(r"^\d+$")
CONTEST_SENT_RE = re.compile(r"^\.\w+")
CONTEST_RECEIVED_RE = re.compile(r"^,\w+")


def classify(word: str) -> tuple[TokenKind, str]:
    """Return (kind, normalised value) for one word."""
    upper = word.upper()
    lower = word.lower()
    if DATE_RE.match(upper):
        return TokenKind.DATE, upper
    if SHORT_DATE_RE.match(upper):
        return TokenKind.SHORT_DATE, upper
    if FREQ_RE.match(upper):
        return TokenKind.FREQUENCY, upper
    if SIGNAL_REPORT_RE.match(upper):
        return TokenKind.SIGNAL_REPORT, upper
    band = lookup_band(word)
    if band is not None:
        return TokenKind.BAND, band.wavelength
    if WWFF_RE.match(upper):
        return TokenKind.WWFF_REF, upper
    if SOTA_RE.match(upper):
        return TokenKind.SOTA_REF, upper
    if POTA_RE.match(upper):
        return TokenKind.POTA_REF, upper
    if lower in KEYWORDS:
        return TokenKind.KEYWORD, lower
    if lower in MODE_TABLE:
        return TokenKind.MODE, canonical_mode(upper)
    if DECIMAL_RE.match(upper):
        return TokenKind.DECIMAL, upper
    if is_callsign(upper):
        return TokenKind.CALL, upper
    if CONTEST_SENT_RE.match(upper):
        return TokenKind.CONTEST_SENT, upper[1:]
    if CONTEST_RECEIVED_RE.match(upper):
        return TokenKind.CONTEST_RECEIVED, upper[1:]
    return TokenKind.LITERAL, upper


def tokenize(line: str, line_no: int = 1) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    n = len(line)
    while pos < n:
        ch = line[pos]
        if ch in WHITESPACE:
            pos += 1
            continue
        if ch == "#":
            break
        if ch in COMMENT_CLOSE:
            close, kind = COMMENT_CLOSE[ch]
            end = line.find(close, pos + 1)
            # An unterminated comment runs to the end of the line
            stop = n if end < 0 else end + 1
            body = line[pos + 1 : n if end < 0 else end]
            tokens.append(
                Token(TokenKind.COMMENT, line[pos:stop], line_no, pos + 1, body.strip(), kind)
            )
            pos = stop
            continue
        start = pos
        while pos < n and line[pos] not in _WORD_STOP:
            pos += 1
        word = line[start:pos]
        kind, value = classify(word)
        tokens.append(Token(kind, word, line_no, start + 1, value))
    return tokens
