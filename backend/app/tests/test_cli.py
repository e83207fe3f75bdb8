import json

from cli.fle import main


def test_compile_and_export(tmp_path, capsys) -> None:
    src = tmp_path / "log.txt"
    src.write_text("mycall JA1ZZZ\ndate 2024-05-01\nmywwff JAFF-0001\n40m cw 0900 JA2AAA\n", encoding="utf-8")
    out = tmp_path / "out"
    rc = main(["compile", str(src), "--target", "wwff-adif", "--out", str(out)])
    assert rc == 0
    written = out / "JA1ZZZ@JAFF-0001-20240501.adi"
    assert written.exists()
    assert "<CALL:6>JA2AAA" in written.read_text(encoding="utf-8")
    assert "1 records, 0 errors" in capsys.readouterr().out


def test_compile_reports_errors(tmp_path, capsys) -> None:
    src = tmp_path / "log.txt"
    src.write_text("40m cw 0900 JA2AAA\n", encoding="utf-8")
    assert main(["compile", str(src)]) == 1
    assert "MissingOperatorContext" in capsys.readouterr().err


def test_convert_adif_to_pota(tmp_path) -> None:
    src = tmp_path / "log.adi"
    src.write_text(
        "<EOH>\n<STATION_CALLSIGN:6>JA1ZZZ<CALL:6>JA2AAA<BAND:3>40m<MODE:2>CW"
        "<QSO_DATE:8>20240501<TIME_ON:4>0900<EOR>\n",
        encoding="utf-8",
    )
    rc = main(["convert", str(src), "--dialect", "adif", "--target", "pota", "--out", str(tmp_path)])
    # the log has no MY_SIG park, so every record is rejected
    assert rc == 1
    assert not list(tmp_path.glob("*@*.adi"))


def test_judge_prints_camel_case_json(tmp_path, capsys) -> None:
    rows = "".join(
        f"V2,JA1ABC,JA/TK-001,01/07/2025,12:00,7MHz,CW,JA2A{c}{c},,\n" for c in "ABCDEFGHIJ"
    )
    src = tmp_path / "sota.csv"
    src.write_text(rows, encoding="utf-8")
    assert main(["judge", str(src), "--mode", "lenient"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["logType"] == "activator"
    assert data["activator"]["summits"][0]["uniqueStations"] == 10


def test_judge_unknown_log_type(tmp_path) -> None:
    src = tmp_path / "bad.csv"
    src.write_text("a,b\n", encoding="utf-8")
    assert main(["judge", str(src)]) == 2
