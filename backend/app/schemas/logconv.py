from typing import Dict, List

from pydantic import BaseModel, Field

from .contact import ContactRecordModel, RowErrorModel


class ImportResultModel(BaseModel):
    dialect: str
    imported: int
    skipped: int = Field(..., description="Header and blank rows")
    records: List[ContactRecordModel]
    errors: List[RowErrorModel] = Field(default_factory=list)


class ConvertResultModel(BaseModel):
    dialect: str
    target: str
    imported: int
    exported: int
    files: Dict[str, str] = Field(default_factory=dict)
    import_errors: List[RowErrorModel] = Field(default_factory=list)
    export_errors: List[RowErrorModel] = Field(default_factory=list)
