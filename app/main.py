"""
Call Metrics - call recording processing service
"""

import asyncio
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from kombu import Connection

from app.api import tasks, transcript
from app.config import settings
from app.database import SessionLocal, engine
from app.jobs.broker import AmqpTaskPublisher
from app.jobs.dispatcher import TaskDispatcher
from app.jobs.pipeline import TaskPipeline
from app.logging_config import configure_logging
from app.search.tantivy_index import TantivySearchIndex
from app.store.sql import SqlMetricsStore
from app.transcription.http import HttpTranscriptionService

configure_logging()

logger = structlog.get_logger()

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting call metrics service", version=VERSION)

    # An unusable index is fatal, let the error stop startup
    search_index = TantivySearchIndex(settings.index_path, heap_size=settings.index_writer_heap_size)
    transcription = HttpTranscriptionService(
        settings.speech_recognition_url,
        timeout=settings.speech_recognition_timeout,
        connect_timeout=settings.speech_recognition_connect_timeout,
    )
    store = SqlMetricsStore(SessionLocal)
    connection = Connection(settings.amqp_url)

    pipeline = TaskPipeline(store, transcription, search_index)
    dispatcher = TaskDispatcher(
        connection,
        pipeline,
        asyncio.get_running_loop(),
        prefetch_count=settings.amqp_prefetch_count,
    )

    app.state.search_index = search_index
    app.state.store = store
    app.state.publisher = AmqpTaskPublisher(connection)

    consumer = asyncio.create_task(asyncio.to_thread(dispatcher.run))

    yield

    logger.info("Shutting down call metrics service")
    dispatcher.stop()
    await consumer
    await transcription.aclose()
    search_index.close()
    connection.release()
    await engine.dispose()


app = FastAPI(
    title="Call Metrics",
    description="Call recording transcription, metrics and scoring",
    version=VERSION,
    lifespan=lifespan,
)


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "worker", "version": VERSION}


@app.get("/health/ready")
async def ready(request: Request):
    """Readiness check with dependency verification"""
    checks = {}

    try:
        await request.app.state.store.ping()
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    try:
        await request.app.state.search_index.ping()
        checks["index"] = "ok"
    except Exception as e:
        checks["index"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


app.include_router(transcript.router, prefix="/api/v1/transcript", tags=["Transcript"])
app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["Tasks"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
