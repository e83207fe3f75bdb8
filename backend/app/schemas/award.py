"""Award judgment response. Keys are camelCase and must stay stable for API clients."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..services.award import AwardJudgmentResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SummitActivationModel(_CamelModel):
    summit_code: str = Field(..., alias="summitCode")
    unique_stations: int = Field(..., alias="uniqueStations")
    qualified: bool


class ActivatorAwardModel(_CamelModel):
    achieved: bool = Field(..., description="10 or more qualified summits")
    qualified_summits: int = Field(..., alias="qualifiedSummits")
    summits: List[SummitActivationModel] = Field(default_factory=list)


class SummitChaseModel(_CamelModel):
    summit_code: str = Field(..., alias="summitCode")
    unique_activators: int = Field(..., alias="uniqueActivators")
    activators: List[str] = Field(default_factory=list)


class ChaserAwardModel(_CamelModel):
    achieved: bool = Field(..., description="At least one summit chased with 10 or more activators")
    qualified_summits: List[SummitChaseModel] = Field(default_factory=list, alias="qualifiedSummits")


class AwardJudgmentModel(_CamelModel):
    success: bool
    callsign: str
    total_qsos: int = Field(..., alias="totalQsos")
    log_type: str = Field(..., alias="logType")
    mode: str
    activator: Optional[ActivatorAwardModel] = None
    chaser: Optional[ChaserAwardModel] = None

    @classmethod
    def from_result(cls, result: AwardJudgmentResult) -> "AwardJudgmentModel":
        activator = None
        if result.activator is not None:
            activator = ActivatorAwardModel(
                achieved=result.activator.achieved,
                qualified_summits=result.activator.qualified_summits,
                summits=[
                    SummitActivationModel(
                        summit_code=s.summit_code,
                        unique_stations=s.unique_stations,
                        qualified=s.qualified,
                    )
                    for s in result.activator.summits
                ],
            )
        chaser = None
        if result.chaser is not None:
            chaser = ChaserAwardModel(
                achieved=result.chaser.achieved,
                qualified_summits=[
                    SummitChaseModel(
                        summit_code=s.summit_code,
                        unique_activators=s.unique_activators,
                        activators=s.activators,
                    )
                    for s in result.chaser.qualified_summits
                ],
            )
        return cls(
            success=result.success,
            callsign=result.callsign,
            total_qsos=result.total_qsos,
            log_type=result.log_type.value,
            mode=result.mode.value,
            activator=activator,
            chaser=chaser,
        )
