"""
core/data - Cluster data layer

Snapshot types, cluster metadata and AWS resource gathering.

Modules:
    - types: immutable snapshot dataclasses (Subnet, RouteTable, ...)
    - cluster: cluster metadata lookup through ocm
    - gather: boto3 based collection of every resource family

Usage:
    from core.data import ClusterData, ClusterInfo, get_cluster_info
    from core.data.gather import ClusterDataCollector

    info = get_cluster_info("my-cluster-id")
    data = ClusterDataCollector(session, info).collect()
"""

from .cluster import get_cluster_info, parse_cluster_info
from .types import (
    AliasTarget,
    AvailabilityZoneBinding,
    ClassicLoadBalancer,
    ClusterData,
    ClusterInfo,
    ClusterType,
    HostedZone,
    HostedZoneWithRecords,
    LoadBalancer,
    ModernLoadBalancer,
    NetworkInterface,
    ResourceRecordSet,
    Route,
    RouteTable,
    Subnet,
    Tag,
    TaggedLoadBalancer,
)

__all__ = [
    # Cluster metadata
    "get_cluster_info",
    "parse_cluster_info",
    # Snapshot types
    "AliasTarget",
    "AvailabilityZoneBinding",
    "ClassicLoadBalancer",
    "ClusterData",
    "ClusterInfo",
    "ClusterType",
    "HostedZone",
    "HostedZoneWithRecords",
    "LoadBalancer",
    "ModernLoadBalancer",
    "NetworkInterface",
    "ResourceRecordSet",
    "Route",
    "RouteTable",
    "Subnet",
    "Tag",
    "TaggedLoadBalancer",
]
