"""Helpers shared by routes that accept an uploaded log file."""

from fastapi import HTTPException, UploadFile, status

from ..core.config import Settings


async def read_upload(file: UploadFile, settings: Settings) -> bytes:
    """Read the whole upload, rejecting it with 413 past the size ceiling."""
    raw = await file.read(settings.max_upload_bytes + 1)
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"{file.filename} exceeds {settings.max_upload_bytes} bytes",
        )
    return raw


def decode_upload(raw: bytes, filename: str | None) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Could not decode {filename} as UTF-8: {e}",
        ) from e


async def read_upload_text(file: UploadFile, settings: Settings) -> str:
    return decode_upload(await read_upload(file, settings), file.filename)
