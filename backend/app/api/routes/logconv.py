"""Log conversion routes: import legacy logs and convert them for upload."""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from ...core.config import Settings, get_settings
from ...exceptions import UnknownDialectError
from ...schemas.contact import ContactRecordModel, RowErrorModel
from ...schemas.logconv import ConvertResultModel, ImportResultModel
from ...services.logconv.base import ImportOptions
from ...services.logconv.registry import get_reader, get_writer
from ..uploads import read_upload_text

router = APIRouter(prefix="/logconv", tags=["logconv"])


def import_options(
    my_callsign: str = "",
    my_ref_source: str = Query("user_defined", pattern="^(rmks1|rmks2|user_defined|none)$"),
    his_ref_source: str = Query("none", pattern="^(rmks1|rmks2|qth|none)$"),
    summit: Optional[str] = None,
    parks: Optional[str] = Query(None, description="Comma separated POTA parks"),
    wwff: Optional[str] = None,
    settings: Settings = Depends(get_settings),
) -> ImportOptions:
    park_list = tuple(p.strip().upper() for p in (parks or "").split(",") if p.strip())
    return ImportOptions(
        my_callsign=my_callsign.strip().upper(),
        my_ref_source=my_ref_source,
        his_ref_source=his_ref_source,
        summit=summit.strip().upper() if summit else None,
        parks=park_list,
        wwff=wwff.strip().upper() if wwff else None,
        local_offset_minutes=settings.hamlog_local_offset_minutes,
    )


def _errors(errors) -> list:
    return [RowErrorModel(line=e.line, message=e.message) for e in errors]


@router.post(
    "/import",
    response_model=ImportResultModel,
    summary="Import a HAMLOG, HamLog iOS, ADIF or SOTA CSV log",
)
async def import_document(
    dialect: str,
    file: UploadFile = File(...),
    options: ImportOptions = Depends(import_options),
    settings: Settings = Depends(get_settings),
) -> ImportResultModel:
    try:
        reader = get_reader(dialect)
    except UnknownDialectError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    text = await read_upload_text(file, settings)
    result = reader.read(text, options)
    return ImportResultModel(
        dialect=reader.dialect.value,
        imported=result.imported,
        skipped=result.skipped,
        records=[ContactRecordModel.from_record(r) for r in result.records],
        errors=_errors(result.errors),
    )


@router.post(
    "/convert",
    response_model=ConvertResultModel,
    summary="Convert a log into SOTA CSV, POTA ADIF or WWFF ADIF files",
)
async def convert_document(
    dialect: str,
    target: str,
    file: UploadFile = File(...),
    options: ImportOptions = Depends(import_options),
    settings: Settings = Depends(get_settings),
) -> ConvertResultModel:
    """Rows that fail to import and records that fail to export are reported separately."""
    try:
        reader = get_reader(dialect)
        writer = get_writer(
            target,
            program_id=settings.adif_program_id,
            program_version=settings.adif_program_version,
        )
    except UnknownDialectError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    text = await read_upload_text(file, settings)
    imported = reader.read(text, options)
    files, export_errors = writer.write_files(imported.records)
    return ConvertResultModel(
        dialect=reader.dialect.value,
        target=writer.target.value,
        imported=imported.imported,
        exported=imported.imported - len(export_errors),
        files=files,
        import_errors=_errors(imported.errors),
        export_errors=_errors(export_errors),
    )
