"""API routes"""
from datetime import datetime

from fastapi import APIRouter, Request

from peakstream.models.schemas import (
    ApiInfoResponse,
    HealthResponse,
    SensorInfo,
    SensorsResponse,
    SessionInfo,
    SessionsResponse,
)

router = APIRouter()


@router.get("/", response_model=ApiInfoResponse)
async def home(request: Request):
    """API info endpoint"""
    return {
        "message": "Peak detection sensor stream",
        "websocket": "/ws?sensor=<id>",
        "status": "running",
        "emission_interval_ms": request.app.state.registry.interval_ms,
    }


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """Health check endpoint"""
    registry = request.app.state.registry
    return {
        "status": "ok",
        "timestamp": datetime.now().isoformat(),
        "active_sessions": len(registry),
        "sensor_count": len(registry.source),
    }


@router.get("/sensors", response_model=SensorsResponse)
async def list_sensors(request: Request):
    """Sensors available for streaming"""
    source = request.app.state.registry.source
    sensors = [
        SensorInfo(id=sensor_id, length=len(source.series_for(sensor_id)))
        for sensor_id in source.sensor_ids
    ]
    return {"count": len(sensors), "sensors": sensors}


@router.get("/sessions", response_model=SessionsResponse)
async def list_sessions(request: Request):
    """Live streaming sessions"""
    sessions = [
        SessionInfo(
            connection_id=session.connection_id,
            sensor_id=session.sensor_id,
            cursor=session.cursor,
        )
        for session in request.app.state.registry.sessions()
    ]
    return {"count": len(sessions), "sessions": sessions}
