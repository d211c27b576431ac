"""
Process-wide message broker connection
"""

from typing import Optional

from person_service.core.config import config
from person_service.core.errors import ErrorResponse
from person_service.core.logger import logger

from .i_message_broker import IMessageBroker
from .message_broker_factory import MessageBrokerFactory


class BrokerConnection:
    """Message broker connection manager"""

    broker: Optional[IMessageBroker] = None


connection = BrokerConnection()


async def connect_to_broker() -> IMessageBroker:
    """Create and connect the configured message broker"""
    logger.info("Connecting to message broker...")

    broker = MessageBrokerFactory.create(config)
    try:
        await broker.connect()
    except Exception as e:
        logger.error(
            f"Could not connect to message broker: {e}",
            metadata={"event": "broker_connection_error", "brokerType": config.message_broker_type}
        )
        raise ErrorResponse(f"Could not connect to message broker: {e}", status_code=503)

    connection.broker = broker
    logger.info(
        "Message broker connected",
        metadata={"event": "broker_connected", "brokerType": config.message_broker_type}
    )
    return broker


async def close_broker_connection():
    """Disconnect the message broker"""
    logger.info("Closing connection to message broker...")
    if connection.broker is not None:
        await connection.broker.disconnect()
        connection.broker = None


async def get_broker() -> IMessageBroker:
    """Get the connected broker, connecting on first use"""
    if connection.broker is None:
        await connect_to_broker()
    return connection.broker
