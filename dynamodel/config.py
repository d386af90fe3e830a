"""
Configuration settings for dynamodel.

Uses Pydantic Settings to load environment variables for the AWS/DynamoDB
connection, the storage backend selection and logging.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # AWS / DynamoDB
    aws_region: str = Field("us-east-1", alias="AWS_REGION")
    aws_access_key_id: Optional[str] = Field(None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[str] = Field(None, alias="AWS_SECRET_ACCESS_KEY")
    dynamodb_endpoint_url: Optional[str] = Field(
        "http://localhost:4566", alias="DYNAMODB_ENDPOINT_URL"
    )

    # Storage
    storage_backend: Literal["dynamodb", "memory"] = Field("dynamodb", alias="STORAGE_BACKEND")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
