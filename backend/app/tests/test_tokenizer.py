from app.services.fle.tokenizer import CommentKind, TokenKind, classify, tokenize


def kinds(line: str):
    return [t.kind for t in tokenize(line)]


def test_qso_line_kinds() -> None:
    assert kinds("14.010 CW 1200 JA2AAA 59 59") == [
        TokenKind.FREQUENCY,
        TokenKind.MODE,
        TokenKind.DECIMAL,
        TokenKind.CALL,
        TokenKind.DECIMAL,
        TokenKind.DECIMAL,
    ]


def test_directive_and_dates() -> None:
    assert classify("mycall") == (TokenKind.KEYWORD, "mycall")
    assert classify("MYSOTA") == (TokenKind.KEYWORD, "mysota")
    assert classify("2024-05-01")[0] == TokenKind.DATE
    assert classify("2024/5/1")[0] == TokenKind.DATE
    assert classify("5/1")[0] == TokenKind.SHORT_DATE


def test_references() -> None:
    assert classify("ja/tk-001") == (TokenKind.SOTA_REF, "JA/TK-001")
    assert classify("JAFF-0123") == (TokenKind.WWFF_REF, "JAFF-0123")
    assert classify("JA-0001") == (TokenKind.POTA_REF, "JA-0001")


def test_band_value_is_wavelength() -> None:
    assert classify("40m") == (TokenKind.BAND, "40m")
    assert classify("2M") == (TokenKind.BAND, "2m")


def test_signal_report_needs_sign() -> None:
    assert classify("-10")[0] == TokenKind.SIGNAL_REPORT
    assert classify("+9")[0] == TokenKind.SIGNAL_REPORT
    assert classify("10")[0] == TokenKind.DECIMAL


def test_calls_modes_and_contest() -> None:
    assert classify("ja1abc/p") == (TokenKind.CALL, "JA1ABC/P")
    assert classify("ft8") == (TokenKind.MODE, "FT8")
    assert classify(".001") == (TokenKind.CONTEST_SENT, "001")
    assert classify(",123") == (TokenKind.CONTEST_RECEIVED, "123")


def test_unknown_word_is_literal() -> None:
    assert classify("hello") == (TokenKind.LITERAL, "HELLO")
    assert classify("+") == (TokenKind.LITERAL, "+")


def test_comments_are_opaque_and_positioned() -> None:
    toks = tokenize("JA2AAA <rig 5W> [tnx] {note here}", line_no=7)
    assert [t.kind for t in toks] == [TokenKind.CALL] + [TokenKind.COMMENT] * 3
    assert toks[1].value == "rig 5W"
    assert toks[1].comment_kind == CommentKind.ANGLE
    assert toks[2].comment_kind == CommentKind.SQUARE
    assert toks[3].comment_kind == CommentKind.CURLY
    assert toks[3].value == "note here"
    assert toks[1].line == 7
    assert toks[1].column == 8


def test_unterminated_comment_runs_to_end_of_line() -> None:
    toks = tokenize("JA2AAA <open comment")
    assert toks[-1].kind == TokenKind.COMMENT
    assert toks[-1].value == "open comment"


def test_hash_ends_line_and_whitespace_dropped() -> None:
    toks = tokenize("  40m　CW   # 7.025 ignored")
    assert [t.lexeme for t in toks] == ["40m", "CW"]
    assert toks[0].column == 3


def test_never_fails() -> None:
    toks = tokenize("!!! ??? @@@")
    assert all(t.kind == TokenKind.LITERAL for t in toks)
    assert tokenize("") == []
