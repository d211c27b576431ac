"""
Core configuration and settings for the Person Service
"""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from person_service.messaging.bindings import StreamBindings


class Config(BaseSettings):
    """Application configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Service information
    service_name: str = Field(default="person-service")
    service_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Server configuration
    port: int = Field(default=8080)
    host: str = Field(default="0.0.0.0")

    # Database configuration
    mongodb_host: str = Field(default="localhost")
    mongodb_port: int = Field(default=27017)
    mongodb_username: Optional[str] = Field(default=None)
    mongodb_password: Optional[str] = Field(default=None)
    mongodb_database: str = Field(default="persondb")
    mongodb_collection: str = Field(default="person")

    @property
    def mongodb_url(self) -> str:
        """Construct MongoDB connection URL"""
        if self.mongodb_username and self.mongodb_password:
            return (
                f"mongodb://{self.mongodb_username}:{self.mongodb_password}"
                f"@{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}?authSource=admin"
            )
        return f"mongodb://{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"

    # Messaging configuration
    message_broker_type: str = Field(default="kafka")
    kafka_bootstrap_servers: str = Field(default="localhost:9092")
    kafka_person_output_topic: str = Field(default="person")
    kafka_person_input_topic: str = Field(default="person")
    kafka_group_id: str = Field(default="person-service-group")
    kafka_auto_offset_reset: str = Field(default="earliest")

    # Run the person consumer inside the API process
    consumer_enabled: bool = Field(default=True)

    @property
    def kafka_brokers(self) -> List[str]:
        return [b.strip() for b in self.kafka_bootstrap_servers.split(",") if b.strip()]

    @property
    def stream_bindings(self) -> StreamBindings:
        return StreamBindings(
            output_topic=self.kafka_person_output_topic,
            input_topic=self.kafka_person_input_topic,
            group_id=self.kafka_group_id,
        )

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_to_file: bool = Field(default=False)
    log_to_console: bool = Field(default=True)
    log_file_path: str = Field(default="logs/person-service.log")

    # Request tracing
    correlation_id_header: str = Field(default="X-Correlation-ID")


# Global config instance
config = Config()
