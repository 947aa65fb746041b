from peakstream.routes.api import router as api_router
from peakstream.routes.websockets import router as websocket_router

__all__ = ["api_router", "websocket_router"]
