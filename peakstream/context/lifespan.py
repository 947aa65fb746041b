"""Application lifespan management"""
from contextlib import asynccontextmanager

from peakstream.config.logger import logger
from peakstream.services.reading_source import ReadingSource
from peakstream.services.session_registry import SessionRegistry


@asynccontextmanager
async def lifespan(app):
    """
    Load the reading source once and own the session registry for the
    lifetime of the application.
    """
    settings = app.state.settings
    logger.info("Starting application...")
    source = ReadingSource.from_file(settings.data_path)
    app.state.registry = SessionRegistry(source, settings.emission_interval_ms)
    logger.info(f"Application started, emitting every {settings.emission_interval_ms} ms")

    yield

    logger.info("Shutting down application...")
    app.state.registry.shutdown()
    logger.info("Application shut down successfully")
