"""
S3 client construction for verification runs.

Builds boto3 clients either for AWS itself or for an S3-compatible mock
endpoint used by integration tests.
"""

import logging
import os
from typing import Optional

import boto3
from botocore.config import Config
from dotenv import load_dotenv

from .config import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_POOL_CONNECTIONS,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_REGION,
    resolve_env_path,
)
from .errors import ConfigurationError

MOCK_ACCESS_KEY = "foo"
MOCK_SECRET_KEY = "bar"


def load_credentials_from_env(env_path: Optional[str] = None) -> tuple[str, str]:
    """
    Load AWS credentials from a .env file and the environment.

    Args:
        env_path: Optional override path (defaults to REPO_FIDELITY_ENV_FILE or ~/.env)

    Returns:
        tuple: (aws_access_key_id, aws_secret_access_key)

    Raises:
        ConfigurationError: If credentials are not found
    """
    resolved_path = resolve_env_path(env_path)
    load_dotenv(resolved_path)

    aws_access_key_id = os.getenv("AWS_ACCESS_KEY_ID")
    aws_secret_access_key = os.getenv("AWS_SECRET_ACCESS_KEY")
    if aws_access_key_id and aws_secret_access_key:
        logging.info("AWS credentials loaded from %s", resolved_path)
        return aws_access_key_id, aws_secret_access_key

    raise ConfigurationError(f"AWS credentials not found in {resolved_path}")


def build_client_config(
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS,
    path_style: bool = False,
) -> Config:
    """Return the botocore config shared by every verification client."""
    config_kwargs = {
        "max_pool_connections": max_pool_connections,
        "connect_timeout": DEFAULT_CONNECT_TIMEOUT,
        "read_timeout": DEFAULT_READ_TIMEOUT,
        "retries": {"max_attempts": DEFAULT_MAX_ATTEMPTS, "mode": "standard"},
    }
    if path_style:
        config_kwargs["s3"] = {"addressing_style": "path"}
    return Config(**config_kwargs)


def create_s3_client(  # pylint: disable=too-many-arguments
    aws_access_key_id: Optional[str] = None,
    aws_secret_access_key: Optional[str] = None,
    region: str = DEFAULT_REGION,
    endpoint_url: Optional[str] = None,
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS,
    env_path: Optional[str] = None,
):
    """
    Create an S3 client with credentials and a pool sized for concurrent fetches.

    Credentials are loaded from the .env file when not given explicitly.
    """
    if aws_access_key_id is None or aws_secret_access_key is None:
        aws_access_key_id, aws_secret_access_key = load_credentials_from_env(env_path)

    client_kwargs = {
        "aws_access_key_id": aws_access_key_id,
        "aws_secret_access_key": aws_secret_access_key,
        "region_name": region,
        "config": build_client_config(max_pool_connections, path_style=endpoint_url is not None),
    }
    session_token = os.getenv("AWS_SESSION_TOKEN")
    if session_token:
        client_kwargs["aws_session_token"] = session_token
    if endpoint_url is not None:
        client_kwargs["endpoint_url"] = endpoint_url

    return boto3.client("s3", **client_kwargs)


def create_mock_s3_client(endpoint_url: str, region: str = DEFAULT_REGION):
    """
    Create an S3 client for a local S3-compatible mock endpoint.

    Uses path-style addressing, placeholder credentials and skips TLS
    certificate verification so self-signed mock servers are accepted.
    """
    if not endpoint_url:
        raise ConfigurationError("A mock S3 client requires an endpoint URL")
    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        region_name=region,
        aws_access_key_id=MOCK_ACCESS_KEY,
        aws_secret_access_key=MOCK_SECRET_KEY,
        verify=False,
        config=build_client_config(path_style=True),
    )


__all__ = [
    "build_client_config",
    "create_mock_s3_client",
    "create_s3_client",
    "load_credentials_from_env",
]
