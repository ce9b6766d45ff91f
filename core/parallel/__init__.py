"""
core/parallel - AWS client helpers

Clients shared by the gathering threads are built here with retries,
timeouts and proxy settings applied.

Example:
    from core.parallel import create_session, get_client

    session = create_session(profile="dev", region_name="us-east-1")
    ec2 = get_client(session, "ec2")
"""

from .client import create_session, get_client, get_proxies

__all__: list[str] = [
    "create_session",
    "get_client",
    "get_proxies",
]
