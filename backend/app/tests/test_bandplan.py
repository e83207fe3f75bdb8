from decimal import Decimal

from utils.bandplan import band_to_freq, freq_to_band, lookup_band, parse_freq, sota_label_to_band
from utils.callsign import call_to_operator, is_callsign, split_callsign
from models.modes import (
    canonical_mode,
    default_report,
    mode_from_adif,
    mode_to_adif_mode,
    mode_to_sota_mode,
)


def test_freq_to_band_edges() -> None:
    assert freq_to_band(7.0) == "40m"
    assert freq_to_band(Decimal("7.2")) == "40m"
    assert freq_to_band(7.3) is None
    assert freq_to_band(433.5) == "70cm"


def test_parse_freq() -> None:
    assert parse_freq("7.025/7.030") == Decimal("7.025")
    assert parse_freq("") is None
    assert parse_freq("abc") is None
    assert parse_freq("-1") is None


def test_band_labels() -> None:
    assert lookup_band("20M").wavelength == "20m"
    assert band_to_freq("20m") == "14MHz"
    assert band_to_freq("70cm", sota=True) == "433MHz"
    assert sota_label_to_band("144MHz") == "2m"
    assert sota_label_to_band("VLF") is None


def test_callsign_patterns() -> None:
    assert is_callsign("JA1ABC")
    assert is_callsign("7K1ABC")
    assert is_callsign("JA1ABC/P")
    assert is_callsign("JA/JA1ABC/P")
    assert not is_callsign("HELLO")
    assert not is_callsign("1234")


def test_operator_reduction() -> None:
    assert call_to_operator("JA/JH1ABC/P") == "JH1ABC"
    assert call_to_operator("JH1ABC/P") == "JH1ABC"
    assert call_to_operator("JH1ABC/1/P") == "JH1ABC"
    assert call_to_operator("JD1/JA1ABC") == "JA1ABC"
    assert split_callsign("JH1ABC/QRP") == ("JH1ABC", "QRP")


def test_mode_tables() -> None:
    assert mode_to_sota_mode("ft8") == "DATA"
    assert mode_to_sota_mode("C4FM") == "DV"
    assert mode_to_sota_mode("OLIVIA") == "OTHER"
    assert mode_to_adif_mode("FT4") == ("MFSK", "FT4")
    assert mode_to_adif_mode("DV") == ("DIGITALVOICE", "")
    assert mode_to_adif_mode("C4FM") == ("DIGITALVOICE", "C4FM")
    assert default_report("SSB") == "59"
    assert default_report("unknown") == "599"


def test_mode_spellings_are_folded() -> None:
    assert canonical_mode("d-star") == "DSTAR"
    assert canonical_mode("Fusion") == "C4FM"
    assert mode_to_adif_mode("FUSION") == ("DIGITALVOICE", "C4FM")
    assert mode_from_adif("DIGITALVOICE", "DSTAR") == "DSTAR"
    assert mode_from_adif("DIGITALVOICE") == "DV"
    assert mode_from_adif("CW") == "CW"
