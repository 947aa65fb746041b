"""WebSocket routes"""
import uuid

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from peakstream.config.logger import logger
from peakstream.models.errors import InvalidSensorError
from peakstream.models.schemas import READING_EVENT, EventMessage, Reading
from peakstream.services.reading_source import parse_sensor_id
from peakstream.services.session_registry import SessionRegistry

router = APIRouter()


@router.websocket("/ws")
async def websocket_sensor(websocket: WebSocket):
    """
    WebSocket endpoint for dashboards, `/ws?sensor=<id>`.
    Streams one reading of the selected sensor per emission interval
    until the dashboard disconnects.
    """
    client_host = websocket.client.host if websocket.client else "Unknown"
    registry: SessionRegistry = websocket.app.state.registry

    try:
        sensor_id = parse_sensor_id(websocket.query_params.get("sensor"))
        registry.source.series_for(sensor_id)
    except InvalidSensorError as e:
        logger.warning(f"Rejected connection from {client_host}: {e}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=str(e))
        return

    connection_id = uuid.uuid4().hex
    await websocket.accept()
    logger.info(f"New client connected with id:{connection_id} from {client_host}")

    async def send_reading(reading: Reading):
        message = EventMessage(event=READING_EVENT, data=reading.model_dump())
        await websocket.send_text(message.model_dump_json())

    try:
        registry.on_connect(connection_id, sensor_id, send_reading)
        while True:
            message = await websocket.receive()
            if message.get("type") == "websocket.disconnect":
                break
            # Dashboards only listen, anything they send is ignored
            logger.debug(f"Ignoring message from {connection_id}: {str(message.get('text'))[:100]}")
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"WebSocket ERROR from {client_host}: {type(e).__name__}: {e}", exc_info=True)
    finally:
        registry.on_disconnect(connection_id)
        logger.info(f"Client {connection_id} disconnected")
