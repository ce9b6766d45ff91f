"""
core/parallel/client.py - boto3 session/client helpers

Builds boto3 clients with adaptive retries, timeouts, a connection pool
sized for the gathering thread pool and, when HTTPS_PROXY is set, a proxy.

Key components:
- create_session: boto3 Session for an optional profile and region
- get_client: boto3 client with the retry/timeout/proxy config applied

Example:
    from core.parallel.client import create_session, get_client

    session = create_session(profile="dev", region_name="us-east-1")

    # defaults (adaptive retry, max 5 attempts)
    ec2 = get_client(session, "ec2")

    # custom settings
    ec2 = get_client(session, "ec2", max_attempts=10, connect_timeout=10)
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Literal, cast

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

# Retry mode type (compatible with botocore TypedDict)
RetryMode = Literal["legacy", "standard", "adaptive"]

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_RETRY_MODE: RetryMode = "adaptive"
DEFAULT_CONNECT_TIMEOUT = 10  # seconds
DEFAULT_READ_TIMEOUT = 30  # seconds
DEFAULT_MAX_POOL_CONNECTIONS = 10


def get_proxies() -> dict[str, str] | None:
    """Proxy mapping for botocore from HTTPS_PROXY / https_proxy

    A bare host:port gets an http:// scheme, matching how curl treats it.
    """
    proxy = os.environ.get("HTTPS_PROXY") or os.environ.get("https_proxy")
    if not proxy:
        return None
    if "://" not in proxy:
        proxy = f"http://{proxy}"
    logger.debug("Using proxy %s", proxy)
    return {"https": proxy}


def create_session(profile: str | None = None, region_name: str | None = None) -> boto3.Session:
    """boto3 Session using the default credential chain or a named profile"""
    import boto3

    return boto3.Session(profile_name=profile, region_name=region_name)


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: int = DEFAULT_READ_TIMEOUT,
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS,
    **kwargs: Any,
) -> Any:
    """boto3 client with retries applied

    Args:
        session: boto3 Session
        service_name: AWS service name (ec2, elb, elbv2, route53)
        region_name: Region (None uses the session default)
        max_attempts: Maximum attempts (default: 5)
        retry_mode: Retry mode ('adaptive' or 'standard')
        connect_timeout: Connect timeout (seconds)
        read_timeout: Read timeout (seconds)
        max_pool_connections: HTTP connection pool size
        **kwargs: Extra arguments passed to session.client()

    Returns:
        boto3 client

    Example:
        from core.parallel.client import get_client

        ec2 = get_client(session, "ec2", region_name="us-east-1")
        subnets = ec2.describe_subnets()["Subnets"]
    """
    from botocore.config import Config

    config = Config(
        retries={"max_attempts": max_attempts, "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        max_pool_connections=max_pool_connections,
        proxies=get_proxies(),
    )

    # merge with a caller supplied config
    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    # cast to Any to bypass boto3-stubs Literal type requirements
    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )
