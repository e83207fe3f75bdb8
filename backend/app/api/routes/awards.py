"""Award routes: judge a SOTA V2 CSV log against the award rules."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from models.log_types import LogType, normalize_mode

from ...core.config import Settings, get_settings
from ...schemas.award import AwardJudgmentModel
from ...services.award import AwardPeriod, judge_award_csv
from ..uploads import read_upload_text

router = APIRouter(prefix="/awards", tags=["awards"])


@router.post(
    "/judge",
    response_model=AwardJudgmentModel,
    summary="Judge a SOTA CSV log for the activator or chaser award",
)
async def judge(
    file: UploadFile = File(...),
    mode: str = "strict",
    settings: Settings = Depends(get_settings),
) -> AwardJudgmentModel:
    """Judge an uploaded SOTA V2 CSV.

    Args:
        file: Activator (10 columns) or chaser (11 columns) CSV, no header.
        mode: ``strict`` (default) or ``lenient``.
    """
    try:
        judgment_mode = normalize_mode(mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    text = await read_upload_text(file, settings)
    result = judge_award_csv(text, judgment_mode, AwardPeriod.from_settings(settings))
    if result.log_type == LogType.UNKNOWN:
        raise HTTPException(
            status_code=422,
            detail="Could not detect log type: expected 10 (activator) or 11 (chaser) columns",
        )
    return AwardJudgmentModel.from_result(result)
