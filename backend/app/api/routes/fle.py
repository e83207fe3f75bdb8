"""FLE routes: compile a Fast Log Entry document, or compile and export it."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ...core.config import Settings, get_settings
from ...exceptions import LexError, UnknownDialectError
from ...schemas.contact import ContactRecordModel, RowErrorModel
from ...schemas.fle import ExportFilesModel, FleCompileResultModel, ParseErrorModel
from ...services.fle.compiler import FleCompileResult, compile_fle
from ...services.logconv.registry import get_writer
from ..uploads import read_upload

router = APIRouter(prefix="/fle", tags=["fle"])


async def _compile_upload(file: UploadFile, settings: Settings) -> FleCompileResult:
    raw = await read_upload(file, settings)
    try:
        return compile_fle(raw)
    except LexError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post(
    "/compile",
    response_model=FleCompileResultModel,
    summary="Compile an FLE document into contact records",
)
async def compile_document(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
) -> FleCompileResultModel:
    """Lines that fail to compile are reported in ``errors``; the rest still produce records."""
    result = await _compile_upload(file, settings)
    return FleCompileResultModel(
        status=result.status,
        log_type=result.log_type,
        has_sota=result.has_sota,
        has_wwff=result.has_wwff,
        has_pota=result.has_pota,
        has_contest=result.has_contest,
        nickname=result.context.nickname,
        qsl_message2=result.context.qsl_message2,
        records=[ContactRecordModel.from_record(r) for r in result.records],
        errors=[
            ParseErrorModel(line=e.line, column=e.column, kind=e.kind.value, message=e.message)
            for e in result.errors
        ],
    )


@router.post(
    "/export",
    response_model=ExportFilesModel,
    summary="Compile an FLE document and export it for SOTA, POTA or WWFF",
)
async def export_document(
    target: str,
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
) -> ExportFilesModel:
    try:
        writer = get_writer(
            target,
            program_id=settings.adif_program_id,
            program_version=settings.adif_program_version,
        )
    except UnknownDialectError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    result = await _compile_upload(file, settings)
    files, errors = writer.write_files(result.records)
    return ExportFilesModel(
        target=writer.target.value,
        exported=len(result.records) - len(errors),
        files=files,
        errors=[RowErrorModel(line=e.line, message=e.message) for e in errors],
    )
