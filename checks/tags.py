"""
checks/tags.py - Cluster ownership tag conventions

Tag keys used by the installer and the load balancer controllers, and the
Collector strategies that decide whether a tagged load balancer belongs to
the cluster's default ingress.

Strategies:
    - HostedControlPlaneCollector: Hypershift clusters, ingress tagged by service name
    - ClusterCollector: OSD/ROSA clusters, tagged with kubernetes.io/cluster/<id>

Usage:
    from checks.tags import collector_for

    collector = collector_for(cluster_info)
    if collector.matches_any(lb.tags):
        ...
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from core.data.types import ClusterInfo, ClusterType, Tag

CLUSTER_TAG_PREFIX = "kubernetes.io/cluster/"
PUBLIC_ELB_TAG = "kubernetes.io/role/elb"
PRIVATE_ELB_TAG = "kubernetes.io/role/internal-elb"

SERVICE_NAME_TAG = "kubernetes.io/service-name"
DEFAULT_ROUTER_SERVICE = "openshift-ingress/router-default"

OWNED = "owned"
SHARED = "shared"
OWNERSHIP_VALUES = frozenset({OWNED, SHARED})


class Collector(Protocol):
    """Tag matching strategy for default-ingress load balancers"""

    def match_tag(self, tag: Tag) -> bool: ...

    def matches_any(self, tags: Iterable[Tag]) -> bool: ...


@dataclass(frozen=True)
class HostedControlPlaneCollector:
    """Matches only the reserved router-default service tag"""

    def match_tag(self, tag: Tag) -> bool:
        return tag.key == SERVICE_NAME_TAG and tag.value == DEFAULT_ROUTER_SERVICE

    def matches_any(self, tags: Iterable[Tag]) -> bool:
        return any(self.match_tag(t) for t in tags)


@dataclass(frozen=True)
class ClusterCollector:
    """Matches kubernetes.io/cluster/<cluster id|infra name> = owned|shared

    An empty infra name is ignored, otherwise the bare prefix would match
    every cluster tag in the account.
    """

    cluster_id: str
    infra_name: str = ""

    def _ownership_keys(self) -> list[str]:
        keys = [f"{CLUSTER_TAG_PREFIX}{self.cluster_id}"]
        if self.infra_name:
            keys.append(f"{CLUSTER_TAG_PREFIX}{self.infra_name}")
        return keys

    def match_tag(self, tag: Tag) -> bool:
        if tag.value not in OWNERSHIP_VALUES:
            return False
        return any(k in tag.key for k in self._ownership_keys())

    def matches_any(self, tags: Iterable[Tag]) -> bool:
        return any(self.match_tag(t) for t in tags)


def collector_for(cluster_info: ClusterInfo) -> Collector:
    """Pick the tag strategy for the cluster type"""
    if cluster_info.cluster_type is ClusterType.HYPERSHIFT:
        return HostedControlPlaneCollector()
    return ClusterCollector(cluster_info.cluster_id, cluster_info.infra_name)


def cluster_tag_owner(key: str) -> str | None:
    """Cluster name referenced by an ownership tag key, None for other keys"""
    _, sep, owner = key.partition(CLUSTER_TAG_PREFIX)
    if not sep:
        return None
    return owner
