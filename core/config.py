"""
core/config.py - Runtime settings

Settings come from the environment; there is no config file.

Environment variables:
    AWS_REGION / AWS_DEFAULT_REGION: region used when --region is not given
    BYOVPC_OCM_BIN: path of the ocm binary (default: "ocm")
    BYOVPC_MAX_WORKERS: thread pool size for gathering (default: 3)

Usage:
    from core.config import Settings, get_version

    settings = Settings.from_env()
    print(settings.default_region)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

FALLBACK_REGION = "us-east-1"
DEFAULT_OCM_BINARY = "ocm"
DEFAULT_MAX_WORKERS = 3
DEFAULT_VERSION = "0.0.1"

VERSION_FILE = Path(__file__).resolve().parent / "version.txt"


def get_default_region() -> str:
    """Region from the AWS environment, falling back to us-east-1"""
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or FALLBACK_REGION


@lru_cache(maxsize=1)
def get_version() -> str:
    """Version string read from core/version.txt (shipped as package data)"""
    try:
        with open(VERSION_FILE, encoding="utf-8") as f:
            return f.read().strip() or DEFAULT_VERSION
    except OSError as e:
        logger.debug("Failed to read version file: %s", e)
    return DEFAULT_VERSION


def get_env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < 1:
        logger.warning("Ignoring %s=%r: must be at least 1", name, raw)
        return default
    return value


@dataclass
class Settings:
    """Runtime settings

    Attributes:
        default_region: Region used when no region option is given
        ocm_binary: ocm executable used to read cluster metadata
        max_workers: Thread pool size of the gatherer
    """

    default_region: str = FALLBACK_REGION
    ocm_binary: str = DEFAULT_OCM_BINARY
    max_workers: int = DEFAULT_MAX_WORKERS

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            default_region=get_default_region(),
            ocm_binary=os.environ.get("BYOVPC_OCM_BIN") or DEFAULT_OCM_BINARY,
            max_workers=get_env_int("BYOVPC_MAX_WORKERS", DEFAULT_MAX_WORKERS),
        )
