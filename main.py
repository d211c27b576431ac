"""
FastAPI Application - Person Service
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from person_service.api import health, person
from person_service.core.config import config
from person_service.core.errors import ErrorResponse, error_response_handler, validation_exception_handler
from person_service.core.logger import logger
from person_service.core.telemetry import instrument_app
from person_service.db.mongodb import connect_to_mongo, close_mongo_connection, get_person_collection
from person_service.events.consumers.person_consumer import PersonConsumer
from person_service.messaging.broker import connect_to_broker, close_broker_connection
from person_service.middleware import CorrelationIdMiddleware
from person_service.repositories.person import PersonRepository


def _log_consumer_exit(task: asyncio.Task) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.error("Person consumer stopped unexpectedly", error=task.exception())


async def start_consumer(broker) -> asyncio.Task:
    """Run the person consumer as a background task of this process"""
    repository = PersonRepository(await get_person_collection())
    consumer = PersonConsumer(broker, repository, config.stream_bindings)
    task = asyncio.create_task(consumer.run())
    task.add_done_callback(_log_consumer_exit)
    return task


async def stop_consumer(task: Optional[asyncio.Task]) -> None:
    if task is None:
        return
    task.cancel()
    with suppress(asyncio.CancelledError):
        await task


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting Person Service...")
    app.state.consumer_task = None
    await connect_to_mongo()
    try:
        broker = await connect_to_broker()
        try:
            if config.consumer_enabled:
                app.state.consumer_task = await start_consumer(broker)

            logger.info(
                "Person Service started successfully",
                metadata={
                    "service_name": config.service_name,
                    "version": config.service_version,
                    "environment": config.environment,
                    "port": config.port,
                    "consumer_enabled": config.consumer_enabled,
                }
            )

            yield

            # Shutdown
            logger.info("Shutting down Person Service...")
        finally:
            await stop_consumer(app.state.consumer_task)
            app.state.consumer_task = None
            await close_broker_connection()
    finally:
        await close_mongo_connection()


app = FastAPI(
    title="Person Service",
    description="Publishes Person records to a topic and serves them back by email",
    version=config.service_version,
    lifespan=lifespan
)

instrument_app(app)

# Configure error handlers
app.add_exception_handler(ErrorResponse, error_response_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.add_middleware(CorrelationIdMiddleware)

# Include API routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(person.router, prefix="/api", tags=["person"])


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development"
    )
