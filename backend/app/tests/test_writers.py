from datetime import datetime, timezone
from decimal import Decimal

import pytest

from models.contact import ContactRecord, References
from models.log_types import ExportTarget
from app.exceptions import UnknownDialectError
from app.services.logconv.adif import _ProgramAdifWriter
from app.services.logconv.registry import export_files, export_log, get_reader, get_writer, import_log
from app.services.logconv.sota_csv import SotaCsvReader, SotaCsvWriter


def rec(**kw) -> ContactRecord:
    base = dict(
        time=datetime(2024, 5, 1, 3, 4, tzinfo=timezone.utc),
        his_callsign="JA2AAA",
        my_callsign="JA1ZZZ/P",
        mode="CW",
        frequency=Decimal("7.025"),
        band="40m",
        my_reference=References(sota="JA/TK-001", pota=("JA-0001", "JA-0002"), wwff="JAFF-0001"),
        his_reference=References(pota=("JA-0100", "JA-0101")),
        rst_sent="599",
        rst_received="579",
    )
    base.update(kw)
    return ContactRecord(**base)


def test_sota_csv_row_layout() -> None:
    out = SotaCsvWriter().write([rec(comment="PM95")])
    assert out.text == "V2,JA1ZZZ/P,JA/TK-001,01/05/2024,03:04,7MHz,CW,JA2AAA,,PM95\n"
    assert out.exported == 1


def test_sota_csv_chaser_row_and_modes() -> None:
    r = rec(my_reference=References(), his_reference=References(sota="JA/NN-001"), mode="FT8", band="2m",
            frequency=None)
    assert SotaCsvWriter().write([r]).text == "V2,JA1ZZZ/P,,01/05/2024,03:04,144MHz,DATA,JA2AAA,JA/NN-001,\n"


def test_sota_csv_rejects_records_without_summit() -> None:
    out = SotaCsvWriter().write([rec(my_reference=References()), rec(mode=None), rec()])
    assert out.exported == 1
    assert [e.line for e in out.errors] == [1, 2]


def test_sota_csv_reader_round_trip() -> None:
    text = SotaCsvWriter().write([rec()]).text
    back = SotaCsvReader().read(text).records[0]
    assert back.his_callsign == "JA2AAA"
    assert back.time == datetime(2024, 5, 1, 3, 4, tzinfo=timezone.utc)
    assert back.mode == "CW"
    assert back.band == "40m"
    assert back.my_reference.sota == "JA/TK-001"


def test_sota_csv_reader_accepts_hhmm_and_frequency() -> None:
    res = SotaCsvReader().read("V2,JA1ABC,JA/TK-001,01/07/2025,1234,7.032MHz,CW,JA2XYZ,,\n")
    r = res.records[0]
    assert r.time == datetime(2025, 7, 1, 12, 34, tzinfo=timezone.utc)
    assert r.frequency == Decimal("7.032")
    assert r.band == "40m"


def test_pota_one_record_per_park_pair() -> None:
    text = export_log([rec()], ExportTarget.POTA_ADIF).text
    assert text.count("<EOR>") == 4
    assert "<MY_SIG:4>POTA<MY_SIG_INFO:7>JA-0002<SIG:4>POTA<SIG_INFO:7>JA-0101" in text


def test_pota_field_order() -> None:
    text = export_log([rec(his_reference=References(), my_reference=References(pota=("JA-0001",)))], "pota").text
    body = text.split("<EOH>\n", 1)[1]
    assert body == (
        "<STATION_CALLSIGN:8>JA1ZZZ/P<CALL:6>JA2AAA<QSO_DATE:8>20240501<TIME_ON:4>0304"
        "<BAND:3>40M<FREQ:6>7.0250<MODE:2>CW<RST_SENT:3>599<RST_RCVD:3>579"
        "<MY_SIG:4>POTA<MY_SIG_INFO:7>JA-0001<OPERATOR:6>JA1ZZZ<EOR>\n"
    )


def test_adif_header_is_deterministic() -> None:
    a = export_log([rec()], "wwff-adif").text
    b = export_log([rec()], "wwff-adif").text
    assert a == b
    assert a.startswith("ADIF export from FLE logbook\n<ADIF_VER:5>3.1.4\n<PROGRAMID:11>FLE_LOGBOOK\n")


def test_program_id_is_configurable() -> None:
    text = export_log([rec()], "wwff", program_id="MYLOG", program_version="2.0").text
    assert "<PROGRAMID:5>MYLOG\n<PROGRAMVERSION:3>2.0\n" in text


def test_wwff_requires_my_reference_and_ascii() -> None:
    out = export_log(
        [rec(my_reference=References()), rec(rst_sent="５９９"), rec()],
        ExportTarget.WWFF_ADIF,
    )
    assert out.exported == 1
    assert [e.line for e in out.errors] == [1, 2]
    assert "ASCII" in out.errors[1].message


def test_missing_mode_rejected_not_dropped() -> None:
    out = export_log([rec(mode=None)], "pota-adif")
    assert out.exported == 0
    assert "MODE" in out.errors[0].message


def test_export_files_split_by_reference() -> None:
    files, errors = export_files([rec(his_reference=References())], "pota")
    assert errors == []
    assert sorted(files) == ["JA1ZZZ-P@JA-0001-20240501.adi", "JA1ZZZ-P@JA-0002-20240501.adi"]
    for text in files.values():
        assert text.count("<EOH>") == 1
        assert text.count("<EOR>") == 1


def test_sota_files_by_date() -> None:
    later = rec(time=datetime(2024, 5, 2, 0, 0, tzinfo=timezone.utc))
    files, _ = export_files([rec(), later], "sota-csv")
    assert sorted(files) == ["sota20240501.csv", "sota20240502.csv"]


def test_unknown_tags() -> None:
    with pytest.raises(UnknownDialectError):
        get_writer("cabrillo")
    with pytest.raises(UnknownDialectError):
        get_reader("edi")
    with pytest.raises(ValueError):
        import_log("", "edi")


def test_reader_synonyms() -> None:
    assert get_reader("ADI").dialect.value == "adif"
    assert get_reader("ios").dialect.value == "hamlog-ios"


def test_program_writer_needs_reference_hooks() -> None:
    class Incomplete(_ProgramAdifWriter):
        program = "POTA"

    with pytest.raises(TypeError):
        Incomplete()
