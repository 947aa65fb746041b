"""Main FastAPI application"""
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from peakstream.config.logger import set_log_level
from peakstream.config.settings import Settings, settings as default_settings
from peakstream.context.lifespan import lifespan
from peakstream.middleware.logging import log_requests
from peakstream.routes import api_router, websocket_router


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(
        title="Peak Detection Sensor Stream",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings or default_settings
    set_log_level(app.state.settings.log_level)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(log_requests)

    app.include_router(api_router)
    app.include_router(websocket_router)
    return app


app = create_app()


def main():
    import uvicorn
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    main()
