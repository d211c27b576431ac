"""
Person Service Consumer - standalone stream consumer process
Persists person records from the input topic without serving HTTP.
Run the API with CONSUMER_ENABLED=false when using this process.
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import asyncio
import signal
from contextlib import suppress
from typing import Optional

from person_service.core.config import config
from person_service.core.logger import logger
from person_service.db.mongodb import connect_to_mongo, close_mongo_connection, get_person_collection
from person_service.events.consumers.person_consumer import PersonConsumer
from person_service.messaging.broker import connect_to_broker, close_broker_connection
from person_service.repositories.person import PersonRepository


class PersonConsumerProcess:
    """Consumer process lifecycle: connect, consume, shut down"""

    def __init__(self):
        self.task: Optional[asyncio.Task] = None
        self.stop_requested = False

    async def start(self):
        """Connect dependencies and consume until stopped"""
        if self.stop_requested:
            return
        self.task = asyncio.create_task(self._run())
        with suppress(asyncio.CancelledError):
            await self.task

    async def _run(self):
        logger.info("Person Consumer starting...")

        await connect_to_mongo()
        broker = await connect_to_broker()

        repository = PersonRepository(await get_person_collection())
        consumer = PersonConsumer(broker, repository, config.stream_bindings)
        await consumer.run()

    def request_stop(self):
        """Cancel the run, whether still connecting or already consuming"""
        logger.info("Stop requested")
        self.stop_requested = True
        if self.task is not None:
            self.task.cancel()

    async def stop(self):
        """Gracefully release connections"""
        logger.info("Stopping Person Consumer...")
        await close_broker_connection()
        await close_mongo_connection()
        logger.info("Person Consumer stopped")


async def main():
    """Main entry point for the consumer"""
    process = PersonConsumerProcess()

    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, process.request_stop)

    try:
        await process.start()
    except Exception as e:
        logger.error(f"Consumer error: {e}", error=e)
        raise
    finally:
        await process.stop()


if __name__ == "__main__":
    asyncio.run(main())
