from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Union


@dataclass(frozen=True)
class BandInfo:
    lower: float
    upper: float
    band_air: str  # label used by Japanese logging programs
    band_sota: str  # label used by the SOTA database CSV
    wavelength: str  # ADIF BAND value (lowercase)


# Amateur allocations as licensed in JA; edges are inclusive.
_BANDS = [
    BandInfo(0.1357, 0.1378, "135kHz", "VLF", "2190m"),
    BandInfo(0.472, 0.479, "475kHz", "VLF", "630m"),
    BandInfo(1.8, 1.9125, "1.9MHz", "1.8MHz", "160m"),
    BandInfo(3.5, 3.805, "3.8MHz", "3.5MHz", "80m"),
    BandInfo(5.2, 5.5, "5MHz", "5MHz", "60m"),
    BandInfo(7.0, 7.2, "7MHz", "7MHz", "40m"),
    BandInfo(10.0, 10.15, "10MHz", "10MHz", "30m"),
    BandInfo(14.0, 14.35, "14MHz", "14MHz", "20m"),
    BandInfo(18.0, 18.168, "18MHz", "18MHz", "17m"),
    BandInfo(21.0, 21.45, "21MHz", "21MHz", "15m"),
    BandInfo(24.0, 24.99, "24MHz", "24MHz", "12m"),
    BandInfo(28.0, 29.7, "28MHz", "28MHz", "10m"),
    BandInfo(50.0, 54.0, "50MHz", "50MHz", "6m"),
    BandInfo(144.0, 146.0, "144MHz", "144MHz", "2m"),
    BandInfo(430.0, 440.0, "430MHz", "433MHz", "70cm"),
    BandInfo(1200.0, 1300.0, "1200MHz", "1290MHz", "23cm"),
    BandInfo(2400.0, 2450.0, "2400MHz", "2.3GHz", "13cm"),
    BandInfo(5650.0, 5850.0, "5600MHz", "5.6GHz", "6cm"),
    BandInfo(10000.0, 10250.0, "10.1GHz", "10GHz", "3cm"),
    BandInfo(10450.0, 10500.0, "10.4GHz", "10GHz", "3cm"),
]


def parse_freq(value: str) -> Optional[Decimal]:
    """Parse a MHz string such as ``7.025`` or ``7.025/7.030`` (first wins)."""
    text = (value or "").strip().split("/")[0]
    if not text:
        return None
    try:
        freq = Decimal(text)
    except InvalidOperation:
        return None
    if not freq.is_finite() or freq <= 0:
        return None
    return freq


def lookup_freq(mhz: Union[float, Decimal]) -> Optional[BandInfo]:
    f = float(mhz)
    for info in _BANDS:
        if info.lower <= f <= info.upper:
            return info
    return None


def lookup_band(band: str) -> Optional[BandInfo]:
    """Find a band by wavelength (``40m``), case-insensitive."""
    if not band:
        return None
    wanted = band.strip().lower()
    for info in _BANDS:
        if info.wavelength == wanted:
            return info
    return None


def freq_to_band(mhz: Union[float, Decimal]) -> Optional[str]:
    info = lookup_freq(mhz)
    return info.wavelength if info else None


def band_to_freq(band: str, sota: bool = False) -> Optional[str]:
    """Map a wavelength band to its frequency label (``20m`` -> ``14MHz``)."""
    info = lookup_band(band)
    if info is None:
        return None
    return info.band_sota if sota else info.band_air


def sota_label_to_band(label: str) -> Optional[str]:
    """Reverse of ``band_to_freq(..., sota=True)``; ``VLF`` is ambiguous and maps to None."""
    wanted = (label or "").strip().lower()
    matches = [b.wavelength for b in _BANDS if b.band_sota.lower() == wanted]
    if len(set(matches)) != 1:
        return None
    return matches[0]
