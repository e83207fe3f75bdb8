from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from models.contact import ContactRecord, References


class ReferencesModel(BaseModel):
    sota: Optional[str] = Field(None, description="SOTA summit, e.g. JA/TK-001")
    pota: List[str] = Field(default_factory=list, description="POTA parks, e.g. JA-0001")
    wwff: Optional[str] = Field(None, description="WWFF reference, e.g. JAFF-0001")

    @classmethod
    def from_references(cls, refs: References) -> "ReferencesModel":
        return cls(sota=refs.sota, pota=list(refs.pota), wwff=refs.wwff)


class ContactRecordModel(BaseModel):
    time: datetime = Field(..., description="QSO time (UTC)")
    his_callsign: str
    my_callsign: str = ""
    mode: Optional[str] = None
    frequency: Optional[Decimal] = Field(None, description="MHz")
    band: Optional[str] = Field(None, description="ADIF band, e.g. 20m")
    my_reference: ReferencesModel = Field(default_factory=ReferencesModel)
    his_reference: ReferencesModel = Field(default_factory=ReferencesModel)
    rst_sent: Optional[str] = None
    rst_received: Optional[str] = None
    contest_sent: Optional[str] = None
    contest_received: Optional[str] = None
    comment: Optional[str] = None
    remarks: Optional[str] = None
    qsl_message: Optional[str] = None
    operator: Optional[str] = None
    rigset: int = Field(0, description="Rig setup number, 0 when not set")

    @classmethod
    def from_record(cls, rec: ContactRecord) -> "ContactRecordModel":
        return cls(
            time=rec.utc,
            his_callsign=rec.his_callsign,
            my_callsign=rec.my_callsign,
            mode=rec.mode,
            frequency=rec.frequency,
            band=rec.effective_band(),
            my_reference=ReferencesModel.from_references(rec.my_reference),
            his_reference=ReferencesModel.from_references(rec.his_reference),
            rst_sent=rec.rst_sent,
            rst_received=rec.rst_received,
            contest_sent=rec.contest_sent,
            contest_received=rec.contest_received,
            comment=rec.comment,
            remarks=rec.remarks,
            qsl_message=rec.qsl_message,
            operator=rec.operator,
            rigset=rec.rigset,
        )


class RowErrorModel(BaseModel):
    line: int = Field(..., description="1-based line (import) or record index (export)")
    message: str
