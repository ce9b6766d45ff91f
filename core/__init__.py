# core/__init__.py
"""
core - byovpc-checker infrastructure

Everything outside the checks themselves: cluster metadata, AWS gathering,
client construction, settings and the exception hierarchy.

Architecture:
    core/
    ├── data/           # snapshot types, cluster metadata, AWS gathering
    ├── parallel/       # boto3 session/client helpers
    ├── config.py       # runtime settings
    └── exceptions.py   # exception hierarchy

Usage:
    from core.config import Settings
    settings = Settings.from_env()

    from core.exceptions import APICallError, is_access_denied
    try:
        data = collector.collect()
    except APICallError as e:
        if is_access_denied(e):
            print("Missing permissions")
"""

from core import config, exceptions

__all__: list[str] = [
    "config",
    "exceptions",
]
