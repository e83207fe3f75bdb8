from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .contact import ContactRecordModel, RowErrorModel


class ParseErrorModel(BaseModel):
    line: int
    column: int = Field(..., description="1-based column of the offending token, 0 if unknown")
    kind: str = Field(..., description="MissingOperatorContext, UnknownDirective, ...")
    message: str


class FleCompileResultModel(BaseModel):
    status: str = Field(..., description="'OK' or 'ERR'")
    log_type: str = Field(..., description="NONE, SOTA, WWFF or BOTH")
    has_sota: bool
    has_wwff: bool
    has_pota: bool
    has_contest: bool
    nickname: Optional[str] = Field(None, description="Operator nickname set by `nickname`")
    qsl_message2: Optional[str] = Field(None, description="Second QSL message set by `qslmsg2`")
    records: List[ContactRecordModel]
    errors: List[ParseErrorModel] = Field(default_factory=list)


class ExportFilesModel(BaseModel):
    target: str
    exported: int
    files: Dict[str, str] = Field(default_factory=dict, description="File name -> document text")
    errors: List[RowErrorModel] = Field(default_factory=list)
