"""FLE compiler: turns tokenized lines into contact records.

The per-line grammar is a small state machine. ``_TRANSITIONS`` maps every
(state, token kind) pair to the next state and an action, and is checked to
be total when the module is imported. An action returns False when it did
not consume its token, which re-dispatches the same token in the new state.

Errors are collected per line. A line that raises a CompileError is dropped
as a whole, including any sticky state (band, mode, time...) it changed.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

from models.contact import ContactRecord, References
from models.log_types import RstType
from models.modes import default_report, rst_type_for
from utils.bandplan import freq_to_band
from utils.callsign import call_to_operator

from ...exceptions import CompileError, CompileErrorKind, LexError
from .context import OperatorContext
from .tokenizer import CommentKind, Token, TokenKind, tokenize

logger = logging.getLogger(__name__)


class ParserState(str, Enum):
    INIT = "Init"
    NORM = "Norm"
    FREQ = "Freq"
    RST_SENT = "RstSent"
    RST_RECEIVED = "RstReceived"


@dataclass(frozen=True)
class ParseError:
    line: int
    column: int
    kind: CompileErrorKind
    message: str


@dataclass
class FleCompileResult:
    records: List[ContactRecord] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)
    context: OperatorContext = field(default_factory=OperatorContext)
    has_sota: bool = False
    has_wwff: bool = False
    has_pota: bool = False
    has_contest: bool = False

    @property
    def status(self) -> str:
        return "OK" if not self.errors else "ERR"

    @property
    def log_type(self) -> str:
        if self.has_sota and (self.has_wwff or self.has_pota):
            return "BOTH"
        if self.has_sota:
            return "SOTA"
        if self.has_wwff or self.has_pota:
            return "WWFF"
        return "NONE"


def _fail(kind: CompileErrorKind, message: str, token: Token) -> CompileError:
    return CompileError(kind, message, column=token.column, line=token.line)


class _LineCompiler:
    """Compiles one line against a candidate OperatorContext."""

    def __init__(self, tokens: List[Token], ctx: OperatorContext, state: ParserState):
        self.tokens = tokens
        self.ctx = ctx
        self.state = state
        self.pos = 0
        self.call: Optional[Token] = None
        self.dangling: Optional[Token] = None  # QSO detail seen before any callsign
        self.his_sota: Optional[str] = None
        self.his_wwff: Optional[str] = None
        self.his_pota: List[str] = []
        self.rst_sent: Optional[str] = None
        self.rst_received: Optional[str] = None
        self.contest_sent: Optional[str] = None
        self.contest_received: Optional[str] = None
        self.comment: Optional[str] = None
        self.remarks: Optional[str] = None
        self.qsl_message: Optional[str] = None

    def run(self) -> Optional[ContactRecord]:
        while self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            next_state, action = _TRANSITIONS[(self.state, token.kind)]
            consumed = action(self, token)
            self.state = next_state
            if consumed:
                self.pos += 1
        return self._finish()

    def _mark_detail(self, token: Token) -> None:
        if self.call is None and self.dangling is None:
            self.dangling = token

    def _finish(self) -> Optional[ContactRecord]:
        ctx = self.ctx
        if self.call is None:
            if self.dangling is not None:
                raise _fail(
                    CompileErrorKind.INCOMPLETE_QSO,
                    f"{self.dangling.lexeme}: no callsign on this line.",
                    self.dangling,
                )
            return None
        if not ctx.band and ctx.frequency is None:
            raise _fail(
                CompileErrorKind.INCOMPLETE_QSO,
                "Band or frequency must be specified before QSO.",
                self.call,
            )
        report = default_report(ctx.mode or "")
        return ContactRecord(
            time=ctx.to_utc(),
            his_callsign=self.call.value,
            my_callsign=ctx.my_callsign or "",
            mode=ctx.mode,
            frequency=ctx.frequency,
            band=ctx.band,
            my_reference=ctx.my_references,
            his_reference=References(
                sota=self.his_sota, pota=tuple(self.his_pota), wwff=self.his_wwff
            ),
            rst_sent=self.rst_sent or report,
            rst_received=self.rst_received or report,
            contest_sent=self.contest_sent,
            contest_received=self.contest_received,
            comment=self.comment,
            remarks=self.remarks,
            qsl_message=self.qsl_message,
            operator=ctx.operator,
            rigset=ctx.rigset,
        )


Action = Callable[[_LineCompiler, Token], bool]


# --- actions -----------------------------------------------------------


def _redispatch(lc: _LineCompiler, token: Token) -> bool:
    return False


def _unexpected(lc: _LineCompiler, token: Token) -> bool:
    raise _fail(CompileErrorKind.UNEXPECTED_TOKEN, f"Unexpected {token.kind.value}: {token.lexeme}", token)


def _literal(lc: _LineCompiler, token: Token) -> bool:
    if lc.pos == 0:
        raise _fail(CompileErrorKind.UNKNOWN_DIRECTIVE, f"Unknown directive: {token.lexeme}", token)
    raise _fail(CompileErrorKind.UNEXPECTED_TOKEN, f"Unknown literal: {token.lexeme}", token)


def _comment(lc: _LineCompiler, token: Token) -> bool:
    if token.comment_kind == CommentKind.ANGLE:
        lc.comment = token.value
    elif token.comment_kind == CommentKind.SQUARE:
        lc.qsl_message = token.value
    else:
        lc.remarks = token.value
    return True


def _set_band(lc: _LineCompiler, token: Token) -> bool:
    ctx = lc.ctx
    ctx.band = token.value
    if ctx.frequency is not None and freq_to_band(ctx.frequency) != token.value:
        ctx.frequency = None
    return True


def _set_frequency(lc: _LineCompiler, token: Token) -> bool:
    freq = Decimal(token.value)
    band = freq_to_band(freq)
    if band is None:
        raise _fail(CompileErrorKind.INVALID_OPERAND, f"{token.lexeme}: out of the band.", token)
    lc.ctx.frequency = freq
    lc.ctx.band = band
    return True


def _set_mode(lc: _LineCompiler, token: Token) -> bool:
    lc.ctx.mode = token.value
    return True


def _set_time(lc: _LineCompiler, token: Token) -> bool:
    ctx = lc.ctx
    digits = len(token.value)
    v = int(token.value)
    hour, minute = ctx.hour, ctx.minute
    if digits == 1:
        minute = (minute // 10) * 10 + v
    elif digits == 2:
        minute = v
    elif digits == 3:
        hour = (hour // 10) * 10 + v // 100
        minute = v % 100
    elif digits == 4:
        hour, minute = divmod(v, 100)
    else:
        raise _fail(CompileErrorKind.INVALID_OPERAND, f"{token.lexeme}: not a time.", token)
    if hour > 23 or minute > 59:
        raise _fail(CompileErrorKind.INVALID_OPERAND, f"{token.lexeme}: time out of range.", token)
    ctx.hour, ctx.minute = hour, minute
    return True


def _start_qso(lc: _LineCompiler, token: Token) -> bool:
    ctx = lc.ctx
    if lc.call is not None:
        raise _fail(
            CompileErrorKind.UNEXPECTED_TOKEN,
            f"Each line must contain only one callsign: {token.value}",
            token,
        )
    if not ctx.my_callsign:
        raise _fail(
            CompileErrorKind.MISSING_OPERATOR_CONTEXT,
            "mycall must be set before the first QSO.",
            token,
        )
    if ctx.current_date is None:
        raise _fail(
            CompileErrorKind.MISSING_OPERATOR_CONTEXT,
            "date must be set before the first QSO.",
            token,
        )
    lc.call = token
    return True


def _parse_report(lc: _LineCompiler, token: Token) -> str:
    if token.kind == TokenKind.SIGNAL_REPORT:
        return token.value
    digits = len(token.value)
    if digits == 1:
        if rst_type_for(lc.ctx.mode or "") == RstType.RS:
            return f"5{token.value}"
        return f"5{token.value}9"
    if digits in (2, 3):
        return token.value
    raise _fail(CompileErrorKind.INVALID_OPERAND, f"{token.lexeme}: not a signal report.", token)


def _rst_sent(lc: _LineCompiler, token: Token) -> bool:
    lc.rst_sent = _parse_report(lc, token)
    return True


def _rst_received(lc: _LineCompiler, token: Token) -> bool:
    lc.rst_received = _parse_report(lc, token)
    return True


def _his_reference(lc: _LineCompiler, token: Token) -> bool:
    lc._mark_detail(token)
    if token.kind == TokenKind.SOTA_REF:
        lc.his_sota = token.value
    elif token.kind == TokenKind.WWFF_REF:
        lc.his_wwff = token.value
    elif token.value not in lc.his_pota:
        lc.his_pota.append(token.value)
    return True


def _contest_sent(lc: _LineCompiler, token: Token) -> bool:
    lc._mark_detail(token)
    ctx = lc.ctx
    if ctx.contest_serial is not None and token.value.isdigit():
        n = int(token.value)
        lc.contest_sent = f"{n:03d}"
        ctx.contest_serial = n + 1
    else:
        lc.contest_sent = token.value
    return True


def _contest_received(lc: _LineCompiler, token: Token) -> bool:
    lc._mark_detail(token)
    ctx = lc.ctx
    lc.contest_received = token.value
    if lc.contest_sent is None:
        if ctx.contest_serial is not None:
            lc.contest_sent = f"{ctx.contest_serial:03d}"
            ctx.contest_serial += 1
        elif ctx.contest_literal is not None:
            lc.contest_sent = ctx.contest_literal
    return True


# --- directives --------------------------------------------------------


def _single_operand(keyword: Token, operands: List[Token]) -> Token:
    if not operands:
        raise _fail(CompileErrorKind.INVALID_OPERAND, f"{keyword.value}: missing operand.", keyword)
    if len(operands) > 1:
        extra = operands[1]
        raise _fail(CompileErrorKind.UNEXPECTED_TOKEN, f"{keyword.value}: extra operand {extra.lexeme}", extra)
    return operands[0]


def _require(kind: TokenKind, operand: Token, what: str) -> str:
    if operand.kind != kind:
        err = (
            CompileErrorKind.MALFORMED_REFERENCE
            if kind in (TokenKind.SOTA_REF, TokenKind.WWFF_REF, TokenKind.POTA_REF)
            else CompileErrorKind.INVALID_OPERAND
        )
        raise _fail(err, f"{operand.lexeme} is invalid {what}.", operand)
    return operand.value


def _do_mycall(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    call = _require(TokenKind.CALL, _single_operand(kw, operands), "callsign")
    ctx.my_callsign = call
    ctx.operator = call_to_operator(call)


def _do_operator(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    ctx.operator = _require(TokenKind.CALL, _single_operand(kw, operands), "operator")


def _do_mysota(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    ref = _require(TokenKind.SOTA_REF, _single_operand(kw, operands), "SOTA ref#")
    ctx.my_references = dataclasses.replace(ctx.my_references, sota=ref)


def _do_mywwff(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    ref = _require(TokenKind.WWFF_REF, _single_operand(kw, operands), "WWFF ref#")
    ctx.my_references = dataclasses.replace(ctx.my_references, wwff=ref)


def _do_mypota(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    if not operands:
        raise _fail(CompileErrorKind.INVALID_OPERAND, "mypota: missing POTA ref#.", kw)
    refs = ctx.my_references
    for operand in operands:
        refs = refs.with_pota(_require(TokenKind.POTA_REF, operand, "POTA ref#"))
    ctx.my_references = refs


DATE_PARTS_RE = re.compile(r"(\d+)[/-](\d+)(?:[/-](\d+))?$")


def _do_date(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    operand = _single_operand(kw, operands)
    m = DATE_PARTS_RE.match(operand.value)
    if operand.kind == TokenKind.DATE and m:
        year, month, day = int(m.group(1)), int(m.group(2)), int(m.group(3))
    elif operand.kind == TokenKind.SHORT_DATE and m:
        if ctx.current_date is None:
            raise _fail(CompileErrorKind.INVALID_OPERAND, "Year unknown, use YYYY-MM-DD.", operand)
        year, month, day = ctx.current_date.year, int(m.group(1)), int(m.group(2))
    else:
        raise _fail(CompileErrorKind.INVALID_OPERAND, f"{operand.lexeme}: wrong date format.", operand)
    if not 1900 <= year <= 2100:
        raise _fail(CompileErrorKind.INVALID_OPERAND, "Date out of range.", operand)
    try:
        ctx.current_date = date(year, month, day)
    except ValueError:
        raise _fail(CompileErrorKind.INVALID_OPERAND, "Date out of range.", operand)
    ctx.reset_time()


def _do_day(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    operand = _single_operand(kw, operands)
    days = {"+": 1, "++": 2}.get(operand.value)
    if operand.kind != TokenKind.LITERAL or days is None:
        raise _fail(CompileErrorKind.INVALID_OPERAND, "Missing operand +/++.", operand)
    if ctx.current_date is None:
        raise _fail(CompileErrorKind.MISSING_OPERATOR_CONTEXT, "day needs a preceding date.", kw)
    ctx.current_date = ctx.current_date + timedelta(days=days)
    ctx.reset_time()


def _do_timezone(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    operand = _single_operand(kw, operands)
    if operand.kind not in (TokenKind.SIGNAL_REPORT, TokenKind.DECIMAL):
        raise _fail(CompileErrorKind.INVALID_OPERAND, f"{operand.lexeme} is invalid timezone.", operand)
    sign = -1 if operand.value.startswith("-") else 1
    digits = operand.value.lstrip("+-")
    if len(digits) <= 2:
        minutes = int(digits) * 60
    elif len(digits) == 4:
        minutes = int(digits[:2]) * 60 + int(digits[2:])
    else:
        raise _fail(CompileErrorKind.INVALID_OPERAND, f"{operand.lexeme} is invalid timezone.", operand)
    if minutes > 14 * 60:
        raise _fail(CompileErrorKind.INVALID_OPERAND, f"{operand.lexeme} is invalid timezone.", operand)
    ctx.timezone_offset = sign * minutes


def _rest_of_line(operands: List[Token]) -> Optional[str]:
    text = " ".join(t.lexeme for t in operands)
    return text or None


def _do_qslmsg(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    msg = _rest_of_line(operands)
    if msg:
        refs = ctx.my_references
        msg = msg.replace("$mywwff", refs.wwff or "")
        msg = msg.replace("$mysota", refs.sota or "")
        msg = msg.replace("$mypota", " ".join(refs.pota))
    ctx.qsl_message = msg


def _do_qslmsg2(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    ctx.qsl_message2 = _rest_of_line(operands)


def _do_nickname(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    ctx.nickname = _single_operand(kw, operands).lexeme


def _do_rigset(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    operand = _single_operand(kw, operands)
    if operand.kind != TokenKind.DECIMAL or int(operand.value) > 255:
        raise _fail(CompileErrorKind.INVALID_OPERAND, "Invalid Rig set#.", operand)
    ctx.rigset = int(operand.value)


def _do_number(ctx: OperatorContext, kw: Token, operands: List[Token]) -> None:
    operand = _single_operand(kw, operands)
    if operand.kind == TokenKind.KEYWORD and operand.value == "consecutive":
        ctx.contest_serial = 1
        ctx.contest_literal = None
    else:
        ctx.contest_serial = None
        ctx.contest_literal = operand.lexeme.upper()


_DIRECTIVES: Dict[str, Callable[[OperatorContext, Token, List[Token]], None]] = {
    "mycall": _do_mycall,
    "operator": _do_operator,
    "mysota": _do_mysota,
    "mywwff": _do_mywwff,
    "mypota": _do_mypota,
    "date": _do_date,
    "day": _do_day,
    "timezone": _do_timezone,
    "qslmsg": _do_qslmsg,
    "qslmsg2": _do_qslmsg2,
    "nickname": _do_nickname,
    "rigset": _do_rigset,
    "number": _do_number,
}


def _directive(lc: _LineCompiler, token: Token) -> bool:
    if lc.pos != 0:
        raise _fail(CompileErrorKind.UNEXPECTED_TOKEN, f"{token.lexeme} must start the line.", token)
    handler = _DIRECTIVES.get(token.value)
    if handler is None:
        raise _fail(CompileErrorKind.UNKNOWN_DIRECTIVE, f"Unknown directive: {token.lexeme}", token)
    handler(lc.ctx, token, lc.tokens[1:])
    lc.pos = len(lc.tokens) - 1
    return True


# --- transition table ----------------------------------------------------

S = ParserState
K = TokenKind

_NORM: Dict[TokenKind, Tuple[ParserState, Action]] = {
    K.KEYWORD: (S.NORM, _directive),
    K.BAND: (S.FREQ, _set_band),
    K.FREQUENCY: (S.NORM, _set_frequency),
    K.MODE: (S.NORM, _set_mode),
    K.DECIMAL: (S.NORM, _set_time),
    K.CALL: (S.RST_SENT, _start_qso),
    K.WWFF_REF: (S.NORM, _his_reference),
    K.SOTA_REF: (S.NORM, _his_reference),
    K.POTA_REF: (S.NORM, _his_reference),
    K.CONTEST_SENT: (S.NORM, _contest_sent),
    K.CONTEST_RECEIVED: (S.NORM, _contest_received),
    K.COMMENT: (S.NORM, _comment),
    K.SIGNAL_REPORT: (S.NORM, _unexpected),
    K.DATE: (S.NORM, _unexpected),
    K.SHORT_DATE: (S.NORM, _unexpected),
    K.LITERAL: (S.NORM, _literal),
}

_TRANSITIONS: Dict[Tuple[ParserState, TokenKind], Tuple[ParserState, Action]] = {}
for _kind in TokenKind:
    _TRANSITIONS[(S.INIT, _kind)] = (S.NORM, _redispatch)
    _TRANSITIONS[(S.NORM, _kind)] = _NORM[_kind]
    _TRANSITIONS[(S.FREQ, _kind)] = (S.NORM, _redispatch)
    _TRANSITIONS[(S.RST_SENT, _kind)] = (S.NORM, _redispatch)
    _TRANSITIONS[(S.RST_RECEIVED, _kind)] = (S.NORM, _redispatch)
_TRANSITIONS[(S.FREQ, K.FREQUENCY)] = (S.NORM, _set_frequency)
_TRANSITIONS[(S.RST_SENT, K.DECIMAL)] = (S.RST_RECEIVED, _rst_sent)
_TRANSITIONS[(S.RST_SENT, K.SIGNAL_REPORT)] = (S.RST_RECEIVED, _rst_sent)
_TRANSITIONS[(S.RST_SENT, K.COMMENT)] = (S.RST_SENT, _comment)
_TRANSITIONS[(S.RST_RECEIVED, K.DECIMAL)] = (S.NORM, _rst_received)
_TRANSITIONS[(S.RST_RECEIVED, K.SIGNAL_REPORT)] = (S.NORM, _rst_received)
_TRANSITIONS[(S.RST_RECEIVED, K.COMMENT)] = (S.RST_RECEIVED, _comment)

assert len(_TRANSITIONS) == len(ParserState) * len(TokenKind)


def _decode(source: Union[str, bytes]) -> str:
    if isinstance(source, str):
        return source.lstrip("\ufeff")
    try:
        return source.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise LexError(f"FLE input is not valid UTF-8 (byte {e.start})") from e


def compile_fle(
    source: Union[str, bytes], context: Optional[OperatorContext] = None
) -> FleCompileResult:
    """Compile one FLE document.

    Lines that fail are reported in ``errors`` and compilation continues
    with the next line. Raises LexError only for undecodable bytes.
    """
    text = _decode(source)
    ctx = context if context is not None else OperatorContext()
    result = FleCompileResult()
    state = ParserState.INIT
    for line_no, line in enumerate(text.splitlines(), start=1):
        tokens = tokenize(line, line_no)
        if not tokens:
            continue
        candidate = ctx.copy()
        try:
            record = _LineCompiler(tokens, candidate, state).run()
        except CompileError as e:
            logger.debug("FLE line %d rejected: %s", line_no, e.message)
            result.errors.append(ParseError(line_no, e.column, e.kind, e.message))
            state = ParserState.NORM
            continue
        ctx = candidate
        state = ParserState.NORM
        if record is not None:
            result.records.append(record)

    refs = ctx.my_references
    result.context = ctx
    result.has_sota = bool(refs.sota)
    result.has_wwff = bool(refs.wwff)
    result.has_pota = bool(refs.pota)
    result.has_contest = ctx.contest_serial is not None or ctx.contest_literal is not None
    logger.info(
        "Compiled FLE document: %d records, %d errors", len(result.records), len(result.errors)
    )
    return result
