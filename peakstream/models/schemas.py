"""DTOs and schemas for readings and API responses"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

READING_EVENT = "reading"


class Reading(BaseModel):
    """One sensor sample as pushed to a dashboard"""
    model_config = ConfigDict(frozen=True)

    timestamp: int
    value: float
    zscore: float


class SensorSeries(BaseModel):
    """Pre-computed readings and z-scores of one sensor"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    readings: tuple[float, ...]
    z_scores: tuple[float, ...] = Field(alias="zScores")

    @model_validator(mode="after")
    def _same_length(self):
        if not self.readings:
            raise ValueError("a sensor series needs at least one reading")
        if len(self.readings) != len(self.z_scores):
            raise ValueError(
                f"readings ({len(self.readings)}) and zScores ({len(self.z_scores)}) differ in length"
            )
        return self

    def __len__(self) -> int:
        return len(self.readings)


class EventMessage(BaseModel):
    """Frame exchanged over the WebSocket"""
    event: str
    data: Any = None


class HealthResponse(BaseModel):
    """Schema for health check"""
    status: str
    timestamp: str
    active_sessions: int
    sensor_count: int


class SensorInfo(BaseModel):
    id: int
    length: int


class SensorsResponse(BaseModel):
    count: int
    sensors: list[SensorInfo]


class SessionInfo(BaseModel):
    connection_id: str
    sensor_id: int
    cursor: int


class SessionsResponse(BaseModel):
    count: int
    sessions: list[SessionInfo]


class ApiInfoResponse(BaseModel):
    """Schema for API info"""
    message: str
    websocket: str
    status: str
    emission_interval_ms: int
