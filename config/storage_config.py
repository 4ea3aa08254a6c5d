"""
Object store configuration.

Resolves S3 / MinIO connection settings from the environment and builds the
boto3 client handle that ObjectStoreClient wraps.

Environment Variables:
    S3_ENDPOINT_URL: MinIO or custom S3-compatible endpoint (optional)
    S3_FORCE_PATH_STYLE: Use path-style addressing (default: true for MinIO)
    S3_REGION: AWS region (default: us-east-1)
    S3_CONNECT_TIMEOUT: Connect timeout in seconds (default: 10)
    S3_READ_TIMEOUT: Read timeout in seconds (default: 60)
    S3_MAX_ATTEMPTS: Total attempts made by botocore's retry handler (default: 3)
    AWS_ACCESS_KEY_ID: Access key
    AWS_SECRET_ACCESS_KEY: Secret key
"""

import logging
from functools import lru_cache
from typing import Optional

import boto3
from botocore.client import BaseClient
from botocore.config import Config
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from services.settings_helpers import (
    get_bool_setting,
    get_float_setting,
    get_int_setting,
    get_setting,
)

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"


class ObjectStoreConfig(BaseModel, frozen=True):
    """S3-compatible connection configuration."""

    region: str = DEFAULT_REGION
    endpoint_url: Optional[str] = None
    force_path_style: bool = True
    access_key_id: Optional[str] = Field(default=None, repr=False)
    secret_access_key: Optional[str] = Field(default=None, repr=False)
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    max_attempts: int = 3


def load_storage_config(env_file: Optional[str] = None) -> ObjectStoreConfig:
    """
    Load object store configuration from environment variables.

    Args:
        env_file: Optional .env file to load first. Existing variables win.

    Returns:
        The resolved configuration
    """
    if env_file:
        load_dotenv(env_file)

    return ObjectStoreConfig(
        region=get_setting("S3_REGION", DEFAULT_REGION),
        endpoint_url=get_setting("S3_ENDPOINT_URL", None),
        force_path_style=get_bool_setting("S3_FORCE_PATH_STYLE", True),
        access_key_id=get_setting("AWS_ACCESS_KEY_ID", None),
        secret_access_key=get_setting("AWS_SECRET_ACCESS_KEY", None),
        connect_timeout=get_float_setting("S3_CONNECT_TIMEOUT", 10.0),
        read_timeout=get_float_setting("S3_READ_TIMEOUT", 60.0),
        max_attempts=get_int_setting("S3_MAX_ATTEMPTS", 3),
    )


def build_s3_client(config: ObjectStoreConfig) -> BaseClient:
    """
    Create a boto3 S3 client for AWS S3 or MinIO.

    Credentials are only passed explicitly when both halves are configured;
    otherwise boto3's default credential chain applies.
    """
    s3_options = {"addressing_style": "path"} if config.force_path_style else {}
    botocore_config = Config(
        signature_version="s3v4",
        s3=s3_options,
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
        retries={"max_attempts": config.max_attempts, "mode": "standard"},
    )

    client_kwargs = {"config": botocore_config}

    if config.endpoint_url:
        client_kwargs["endpoint_url"] = config.endpoint_url

    if config.access_key_id and config.secret_access_key:
        client_kwargs["aws_access_key_id"] = config.access_key_id
        client_kwargs["aws_secret_access_key"] = config.secret_access_key

    logger.debug(
        "Creating S3 client (region=%s, endpoint=%s)",
        config.region,
        config.endpoint_url or "default",
    )
    return boto3.client("s3", region_name=config.region, **client_kwargs)


@lru_cache
def get_s3_client() -> BaseClient:
    """Get or create the process-wide S3 client from environment configuration."""
    return build_s3_client(load_storage_config())
