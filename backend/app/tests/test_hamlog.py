from datetime import datetime, timezone
from decimal import Decimal

from app.services.logconv.base import ImportOptions
from app.services.logconv.hamlog import HamlogIosReader, HamlogReader
from app.services.logconv.refs import get_ref


def hamlog_row(call="JA2AAA", day="24/07/01", time="09:00J", freq="7.025", mode="CW",
               gl="", qth="Tokyo", rmks1="", rmks2="") -> str:
    cols = [call, day, time, "599", "579", freq, mode, "100110", gl, "J", "Taro", qth, rmks1, rmks2, "0"]
    return ",".join(cols)


def ios_row(stamp="2024-07-01 09:00:00 +0900", freq="14.062", call="JA3BBB", qth="JA/OS-001",
            mode="CW", rmks2="") -> str:
    cols = [stamp, "", freq, call, "599", "559", "PM74", "Jiro", qth, "", "", mode, "", rmks2,
            "", "", "", "", ""]
    return ",".join(cols)


def test_get_ref_extracts_programs_and_grid() -> None:
    info = get_ref("JA/TK-001 JAFF-0123,JA-0005 PM95vq hello")
    assert info.sota == "JA/TK-001"
    assert info.wwff == ["JAFF-0123"]
    assert info.pota == ["JA-0005"]
    assert info.grid == "PM95vq"
    assert info.rest == "hello"


def test_local_time_converted_to_utc() -> None:
    res = HamlogReader().read(hamlog_row() + "\n", ImportOptions(my_callsign="ja1zzz"))
    assert res.errors == []
    rec = res.records[0]
    assert rec.time == datetime(2024, 7, 1, 0, 0, tzinfo=timezone.utc)
    assert rec.my_callsign == "JA1ZZZ"
    assert rec.frequency == Decimal("7.025")
    assert rec.band == "40m"
    assert (rec.rst_sent, rec.rst_received) == ("599", "579")


def test_utc_flag_and_two_digit_year() -> None:
    rec = HamlogReader().read(hamlog_row(day="99/12/31", time="23:10U")).records[0]
    assert rec.time == datetime(1999, 12, 31, 23, 10, tzinfo=timezone.utc)


def test_user_defined_my_reference() -> None:
    opts = ImportOptions(my_callsign="JA1ZZZ", summit="JA/TK-001", parks=("JA-0001",))
    rec = HamlogReader().read(hamlog_row(), opts).records[0]
    assert rec.my_reference.sota == "JA/TK-001"
    assert rec.my_reference.pota == ("JA-0001",)


def test_references_from_remarks() -> None:
    opts = ImportOptions(my_ref_source="rmks1", his_ref_source="rmks2")
    row = hamlog_row(rmks1="JA/TK-001", rmks2="JAFF-0002 PM95")
    rec = HamlogReader().read(row, opts).records[0]
    assert rec.my_reference.sota == "JA/TK-001"
    assert rec.his_reference.wwff == "JAFF-0002"
    assert rec.remarks == "JA/TK-001 JAFF-0002 PM95"


def test_grid_from_gl_column_or_remarks() -> None:
    assert HamlogReader().read(hamlog_row(gl="PM95")).records[0].comment == "PM95"
    assert HamlogReader().read(hamlog_row(rmks2="qth PM85ab")).records[0].comment == "PM85ab"


def test_bad_rows_are_reported_with_line_numbers() -> None:
    text = "\n".join([
        hamlog_row(),
        hamlog_row(freq="abc"),
        "JA2AAA,24/07/01",
        "",
        hamlog_row(day="24/13/01"),
        hamlog_row(call="JA2CCC"),
    ])
    res = HamlogReader().read(text)
    assert res.imported == 2
    assert [e.line for e in res.errors] == [2, 3, 5]


def test_out_of_band_frequency_is_an_error() -> None:
    res = HamlogReader().read(hamlog_row(freq="8.5"))
    assert res.imported == 0
    assert "out of range" in res.errors[0].message


def test_ios_rows() -> None:
    text = "TimeOn,x\n" + ios_row() + "\n"
    res = HamlogIosReader().read(text, ImportOptions(his_ref_source="qth"))
    assert res.skipped == 1
    rec = res.records[0]
    assert rec.time == datetime(2024, 7, 1, 0, 0, tzinfo=timezone.utc)
    assert rec.his_callsign == "JA3BBB"
    assert rec.band == "20m"
    assert rec.rst_sent == "559"
    assert rec.rst_received == "599"
    assert rec.his_reference.sota == "JA/OS-001"
    assert rec.comment == "PM74"


def test_hamlog_reader_detects_ios_rows() -> None:
    res = HamlogReader().read(hamlog_row() + "\n" + ios_row() + "\n")
    assert [r.his_callsign for r in res.records] == ["JA2AAA", "JA3BBB"]


def test_ios_negative_offset() -> None:
    rec = HamlogIosReader().read(ios_row(stamp="2024-07-01 20:00:00 -0500")).records[0]
    assert rec.time == datetime(2024, 7, 2, 1, 0, tzinfo=timezone.utc)
