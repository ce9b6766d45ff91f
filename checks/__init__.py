"""
checks - Network topology classification and verification

Pure functions and classes over an already gathered ClusterData snapshot.
Nothing in this package performs I/O.

Usage:
    from checks import HostedZoneVerifier, NetworkVerifier, NetworkVerifierConfig

    network = NetworkVerifier(NetworkVerifierConfig.from_cluster_data(data))
    dns = HostedZoneVerifier(data.hosted_zones, data.load_balancers)
    results = network.verify() + dns.verify()
"""

from .dns import HostedZoneVerifier
from .network import NetworkVerifier, NetworkVerifierConfig
from .tags import (
    CLUSTER_TAG_PREFIX,
    PRIVATE_ELB_TAG,
    PUBLIC_ELB_TAG,
    ClusterCollector,
    Collector,
    HostedControlPlaneCollector,
    collector_for,
)
from .topology import SubnetTopology, build_route_table_index
from .types import Severity, VerificationResult, Verifier

__all__ = [
    # Verifiers
    "HostedZoneVerifier",
    "NetworkVerifier",
    "NetworkVerifierConfig",
    # Tag strategies
    "CLUSTER_TAG_PREFIX",
    "PRIVATE_ELB_TAG",
    "PUBLIC_ELB_TAG",
    "ClusterCollector",
    "Collector",
    "HostedControlPlaneCollector",
    "collector_for",
    # Topology
    "SubnetTopology",
    "build_route_table_index",
    # Results
    "Severity",
    "VerificationResult",
    "Verifier",
]
