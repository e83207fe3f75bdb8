from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from utils.bandplan import freq_to_band
from utils.callsign import call_to_operator
from .modes import mode_to_adif_mode


@dataclass(frozen=True)
class References:
    """Program references held by one side of a QSO.

    A joint activation carries several programs at once, so every program
    has its own slot. POTA allows more than one park (n-fer).
    """

    sota: Optional[str] = None
    pota: Tuple[str, ...] = ()
    wwff: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.sota or self.pota or self.wwff)

    def codes(self) -> List[str]:
        out: List[str] = []
        if self.sota:
            out.append(self.sota)
        out.extend(self.pota)
        if self.wwff:
            out.append(self.wwff)
        return out

    def with_pota(self, park: str) -> "References":
        if park in self.pota:
            return self
        return References(sota=self.sota, pota=self.pota + (park,), wwff=self.wwff)


@dataclass
class ContactRecord:
    time: datetime  # aware, UTC
    his_callsign: str
    my_callsign: str = ""
    mode: Optional[str] = None
    frequency: Optional[Decimal] = None  # MHz
    band: Optional[str] = None  # wavelength, e.g. "20m"
    my_reference: References = field(default_factory=References)
    his_reference: References = field(default_factory=References)
    rst_sent: Optional[str] = None
    rst_received: Optional[str] = None
    contest_sent: Optional[str] = None
    contest_received: Optional[str] = None
    comment: Optional[str] = None
    remarks: Optional[str] = None
    qsl_message: Optional[str] = None
    operator: Optional[str] = None
    rigset: int = 0  # rig setup number chosen with `rigset`

    @staticmethod
    def _utc(when: datetime) -> datetime:
        if when.tzinfo is None:
            return when.replace(tzinfo=timezone.utc)
        return when.astimezone(timezone.utc)

    @property
    def utc(self) -> datetime:
        return ContactRecord._utc(self.time)

    def effective_band(self) -> Optional[str]:
        if self.band:
            return self.band
        if self.frequency is not None:
            return freq_to_band(self.frequency)
        return None

    def my_operator(self) -> str:
        return self.operator or call_to_operator(self.my_callsign)

    def his_operator(self) -> str:
        return call_to_operator(self.his_callsign)

    def to_adif_fields(
        self,
        my_sig: Optional[Tuple[str, str]] = None,
        sig: Optional[Tuple[str, str]] = None,
    ) -> list[tuple[str, str]]:
        """Build ADIF fields in export order.

        ``my_sig``/``sig`` are (program, reference) pairs such as
        ("POTA", "JA-0001"). Raises ValueError when a field ADIF requires is
        missing.
        """
        if not self.his_callsign:
            raise ValueError("CALL is required for ADIF export.")
        if not self.mode:
            raise ValueError(f"MODE is required for ADIF export ({self.his_callsign}).")
        band = self.effective_band()
        if not band:
            raise ValueError(f"BAND or FREQ is required for ADIF export ({self.his_callsign}).")

        utc = self.utc
        mode, submode = mode_to_adif_mode(self.mode)
        fields: list[tuple[str, str]] = []

        def put(tag: str, val: Optional[str]):
            if val not in (None, ""):
                fields.append((tag, str(val)))

        put("STATION_CALLSIGN", self.my_callsign.upper())
        put("CALL", self.his_callsign.upper())
        put("QSO_DATE", utc.strftime("%Y%m%d"))
        put("TIME_ON", utc.strftime("%H%M"))
        put("BAND", band.upper())
        if self.frequency is not None:
            put("FREQ", f"{self.frequency:.4f}")
        put("MODE", mode)
        put("SUBMODE", submode)
        put("RST_SENT", self.rst_sent)
        put("RST_RCVD", self.rst_received)
        if my_sig:
            put("MY_SIG", my_sig[0])
            put("MY_SIG_INFO", my_sig[1])
        if sig:
            put("SIG", sig[0])
            put("SIG_INFO", sig[1])
        put("STX_STRING", self.contest_sent)
        put("SRX_STRING", self.contest_received)
        if self.my_callsign:
            put("OPERATOR", self.my_operator())
        return fields
