"""
core/data/cluster.py - Cluster metadata lookup

Reads the cluster description from `ocm describe cluster --json <id>` and
reduces it to the ClusterInfo fields the checks need.

Usage:
    from core.data.cluster import get_cluster_info

    info = get_cluster_info("2abc...")
    if info.is_byovpc:
        ...
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any

from core.config import Settings
from core.exceptions import ClusterInfoError

from .types import ClusterInfo, ClusterType

logger = logging.getLogger(__name__)


def _describe_cluster(cluster_id: str, ocm_binary: str) -> dict[str, Any]:
    cmd = [ocm_binary, "describe", "cluster", "--json", cluster_id]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except FileNotFoundError as e:
        raise ClusterInfoError(cluster_id, f"'{ocm_binary}' was not found on PATH", cause=e) from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise ClusterInfoError(cluster_id, f"ocm exited with status {e.returncode}: {stderr}", cause=e) from e

    logger.debug("OCM cluster information: %s", proc.stdout)
    try:
        data = json.loads(proc.stdout)
    except json.JSONDecodeError as e:
        raise ClusterInfoError(cluster_id, "ocm returned invalid JSON", cause=e) from e
    if not isinstance(data, dict):
        raise ClusterInfoError(cluster_id, "ocm returned an unexpected document")
    return data


def _cluster_type(cluster_json: dict[str, Any]) -> ClusterType | None:
    hypershift = cluster_json.get("hypershift") or {}
    if hypershift.get("enabled") is True:
        return ClusterType.HYPERSHIFT
    product = (cluster_json.get("product") or {}).get("id")
    if product == "osd":
        return ClusterType.OSD
    if product == "rosa":
        return ClusterType.ROSA
    return None


def _base_domain(cluster_json: dict[str, Any]) -> str | None:
    """Base domain derived from the API URL

    https://api.<name>.<shard>.<base domain>:6443 -> <base domain>
    """
    api_url = (cluster_json.get("api") or {}).get("url")
    if not api_url:
        return None
    host = api_url.split("://", 1)[-1].split("/", 1)[0].split(":", 1)[0]
    parts = host.split(".")
    if len(parts) < 3:
        logger.warning("Cannot derive a base domain from API URL %s", api_url)
        return None
    base_domain = ".".join(parts[2:])
    logger.debug("Base domain calculated as: %s", base_domain)
    return base_domain


def parse_cluster_info(cluster_id: str, cluster_json: dict[str, Any]) -> ClusterInfo:
    """Build ClusterInfo from an `ocm describe cluster --json` document

    Raises:
        ClusterInfoError: product unknown or infra name missing
    """
    subnet_ids = tuple((cluster_json.get("aws") or {}).get("subnet_ids") or ())
    if not subnet_ids:
        logger.warning("No subnet ids configured - checks relying on them will be skipped.")

    cluster_type = _cluster_type(cluster_json)
    if cluster_type is None:
        raise ClusterInfoError(
            cluster_id,
            "Could not determine product - only OSD (on AWS), ROSA and Hypershift are supported.",
        )
    logger.debug("Product is: %s", cluster_type.value)

    if cluster_type is ClusterType.HYPERSHIFT:
        infra_name = cluster_json.get("id")
    else:
        infra_name = cluster_json.get("infra_id")
    if not infra_name:
        raise ClusterInfoError(cluster_id, "did not find an infra id for the cluster")

    return ClusterInfo(
        cluster_id=cluster_id,
        infra_name=infra_name,
        cluster_type=cluster_type,
        cloud_provider=(cluster_json.get("cloud_provider") or {}).get("id", ""),
        subnet_ids=tuple(str(s) for s in subnet_ids),
        base_domain=_base_domain(cluster_json),
    )


def get_cluster_info(cluster_id: str, settings: Settings | None = None) -> ClusterInfo:
    """Look the cluster up through ocm

    Raises:
        ClusterInfoError: ocm missing/failing or the description is unusable
    """
    settings = settings or Settings.from_env()
    return parse_cluster_info(cluster_id, _describe_cluster(cluster_id, settings.ocm_binary))
