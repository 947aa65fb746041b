"""Request logging middleware"""
import time

from fastapi import Request

from peakstream.config.logger import logger


async def log_requests(request: Request, call_next):
    """Log failed HTTP requests with how long they took, successful ones only at debug level"""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    line = f"{request.method} {request.url.path} - Status: {response.status_code} ({elapsed_ms:.1f} ms)"
    if response.status_code >= 400:
        logger.warning(line)
    else:
        logger.debug(line)
    return response
