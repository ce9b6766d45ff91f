"""
checks/network.py - Network verifier

Checks over the classified subnet topology and the cluster load balancers:

1. Number of subnets per (VPC, AZ): at most 2 (one public, one private)
2. Load balancer AZ bindings only use configured subnets
3. Subnet tags: cluster ownership and ELB role tags
4. Load balancer ENIs only live in configured subnets
5. Subnet route tables (skipped for BYOVPC, not available otherwise)

Every check returns at least one result. Results are ordered
deterministically (sorted ids) regardless of API return order.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from core.data.types import (
    ClassicLoadBalancer,
    ClusterData,
    ClusterInfo,
    ModernLoadBalancer,
    NetworkInterface,
    RouteTable,
    Subnet,
    TaggedLoadBalancer,
)
from core.exceptions import InvariantError

from .tags import CLUSTER_TAG_PREFIX, OWNED, PRIVATE_ELB_TAG, PUBLIC_ELB_TAG, cluster_tag_owner
from .topology import SubnetTopology
from .types import VerificationResult

logger = logging.getLogger(__name__)

MAX_SUBNETS_PER_AZ = 2


@dataclass(frozen=True)
class NetworkVerifierConfig:
    """Inputs of the network verifier

    Only cluster_info is required; every resource collection defaults to
    empty, which the checks treat as "nothing to check".

    Attributes:
        cluster_info: Cluster metadata (cluster_id must be non-empty)
        configured_subnets: Subnets explicitly configured for the cluster
        subnets: All subnets of the cluster VPC
        route_tables: Route tables associated with those subnets
        load_balancers: Cluster load balancers with their tags
        network_interfaces: ENIs of the cluster load balancers
    """

    cluster_info: ClusterInfo
    configured_subnets: Sequence[Subnet] = ()
    subnets: Sequence[Subnet] = ()
    route_tables: Sequence[RouteTable] = ()
    load_balancers: Sequence[TaggedLoadBalancer] = ()
    network_interfaces: Sequence[NetworkInterface] = ()

    def __post_init__(self) -> None:
        if not self.cluster_info.cluster_id:
            raise InvariantError("A cluster id is required to verify the cluster network")
        # freeze caller supplied lists
        for name in ("configured_subnets", "subnets", "route_tables", "load_balancers", "network_interfaces"):
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))

    @classmethod
    def from_cluster_data(cls, data: ClusterData) -> NetworkVerifierConfig:
        return cls(
            cluster_info=data.cluster_info,
            configured_subnets=data.configured_subnets,
            subnets=data.subnets,
            route_tables=data.route_tables,
            load_balancers=data.load_balancers,
            network_interfaces=data.network_interfaces,
        )


class NetworkVerifier:
    """Subnet, tag and load balancer placement checks"""

    def __init__(self, config: NetworkVerifierConfig):
        self.config = config
        self.cluster_info = config.cluster_info
        self.topology = SubnetTopology(config.subnets, config.route_tables)
        self._configured_subnet_ids = frozenset(
            [s.subnet_id for s in config.configured_subnets] + list(config.cluster_info.subnet_ids)
        )

    # =========================================================================
    # Subnet count
    # =========================================================================

    def verify_number_of_subnets(self) -> VerificationResult:
        logger.info("Checking number of subnets per AZ")
        counts = Counter((s.vpc_id, s.availability_zone) for s in self.config.subnets)
        problematic = sorted((vpc, az, n) for (vpc, az), n in counts.items() if n > MAX_SUBNETS_PER_AZ)
        if not problematic:
            return VerificationResult.ok("All AZs have the expected number of subnets", "subnet_count")

        listing = ", ".join(f"({vpc}, {az}, {n})" for vpc, az, n in problematic)
        return VerificationResult.warning(
            f"Found more than {MAX_SUBNETS_PER_AZ} subnets per AZ (vpc, az, count): {listing}",
            "subnet_too_many_per_az",
        )

    # =========================================================================
    # Subnet tags
    # =========================================================================

    def _is_own_cluster(self, owner: str) -> bool:
        if owner == self.cluster_info.cluster_id:
            return True
        return bool(self.cluster_info.infra_name) and owner == self.cluster_info.infra_name

    def _verify_tags_of(self, subnet: Subnet) -> list[VerificationResult]:
        subnet_id = subnet.subnet_id
        logger.debug("Checking subnet: %s", subnet_id)
        results: list[VerificationResult] = []
        keys = subnet.tag_keys

        if not any(CLUSTER_TAG_PREFIX in k for k in keys):
            results.append(
                VerificationResult.info(
                    f"Subnet {subnet_id} is missing a {CLUSTER_TAG_PREFIX}<cluster> tag",
                    "subnet_missing_cluster_tag",
                )
            )

        for tag in subnet.tags:
            owner = cluster_tag_owner(tag.key)
            if owner is None or tag.value != OWNED or self._is_own_cluster(owner):
                continue
            results.append(
                VerificationResult.critical(
                    f"Subnet {subnet_id} is tagged as owned by a different cluster: {tag.key}",
                    "subnet_incorrect_cluster_tag",
                )
            )

        if self.topology.is_private(subnet_id) and PRIVATE_ELB_TAG not in keys:
            results.append(
                VerificationResult.info(
                    f"Subnet {subnet_id} is private but is missing the {PRIVATE_ELB_TAG} tag",
                    "subnet_missing_private_elb_tag",
                )
            )
        if self.topology.is_public(subnet_id) and PUBLIC_ELB_TAG not in keys:
            results.append(
                VerificationResult.info(
                    f"Subnet {subnet_id} is public but is missing the {PUBLIC_ELB_TAG} tag",
                    "subnet_missing_public_elb_tag",
                )
            )

        if not results:
            results.append(VerificationResult.ok(f"Subnet {subnet_id} seems correctly setup.", "subnet_tags"))
        return results

    def verify_subnet_tags(self) -> list[VerificationResult]:
        logger.info("Checking tags per subnet")
        results: list[VerificationResult] = []
        for subnet in sorted(self.config.subnets, key=lambda s: s.subnet_id):
            results.extend(self._verify_tags_of(subnet))
        return results

    # =========================================================================
    # Route tables
    # =========================================================================

    def verify_subnet_routetables(self) -> VerificationResult:
        if self.cluster_info.is_byovpc:
            return VerificationResult.ok(
                "Skipping subnet route table check: subnets are provided by the customer (BYOVPC)",
                "subnet_routetables",
            )
        return VerificationResult.info(
            "Subnet route table check is not available for installer-managed VPCs",
            "subnet_routetables",
        )

    # =========================================================================
    # Load balancers
    # =========================================================================

    def verify_loadbalancer_subnets(self) -> list[VerificationResult]:
        """AZ bindings of the modern load balancers must use configured subnets

        Classic load balancers are not evaluated by this check.
        """
        logger.info("Checking load balancer subnets")
        if not self._configured_subnet_ids:
            return [
                VerificationResult.ok(
                    "No subnets configured for the cluster, skipping load balancer subnet check",
                    "loadbalancer_subnets",
                )
            ]

        results: list[VerificationResult] = []
        for tagged in self.config.load_balancers:
            lb = tagged.load_balancer
            if isinstance(lb, ClassicLoadBalancer):
                logger.info("Classic load balancer %s is not evaluated for subnet placement", lb.name)
                continue
            if not isinstance(lb, ModernLoadBalancer):
                raise TypeError(f"Unknown load balancer variant: {type(lb).__name__}")
            for binding in lb.availability_zones:
                if binding.subnet_id in self._configured_subnet_ids:
                    continue
                results.append(
                    VerificationResult.warning(
                        f"LoadBalancer {lb.arn} uses subnet {binding.subnet_id} in {binding.zone_name} "
                        "which is not configured for the cluster",
                        "loadbalancer_incorrect_subnet",
                    )
                )

        if not results:
            results.append(
                VerificationResult.ok("LoadBalancer subnet associations seem correct", "loadbalancer_subnets")
            )
        return results

    def _load_balancer_enis(self) -> list[tuple[NetworkInterface, str]]:
        names = {lb.name for lb in self.config.load_balancers}
        bound = []
        for eni in self.config.network_interfaces:
            lb_name = eni.load_balancer_name
            if lb_name is not None and lb_name in names:
                bound.append((eni, lb_name))
        return sorted(bound, key=lambda pair: pair[0].eni_id)

    def verify_loadbalancer_eni_subnets(self) -> list[VerificationResult]:
        logger.info("Checking load balancer ENI subnets")
        bound = self._load_balancer_enis()
        if not bound:
            return [
                VerificationResult.critical(
                    "No network interfaces found for the cluster load balancers",
                    "loadbalancer_enis_missing",
                )
            ]
        if not self._configured_subnet_ids:
            return [
                VerificationResult.ok(
                    "No subnets configured for the cluster, skipping load balancer ENI subnet check",
                    "loadbalancer_eni_subnets",
                )
            ]

        results = []
        for eni, lb_name in bound:
            if eni.subnet_id in self._configured_subnet_ids:
                results.append(
                    VerificationResult.ok(
                        f"ENI {eni.eni_id} of LoadBalancer {lb_name} is in configured subnet {eni.subnet_id}",
                        "loadbalancer_eni_subnets",
                    )
                )
            else:
                results.append(
                    VerificationResult.warning(
                        f"ENI {eni.eni_id} of LoadBalancer {lb_name} is in subnet {eni.subnet_id} "
                        "which is not configured for the cluster",
                        "loadbalancer_eni_incorrect_subnet",
                    )
                )
        return results

    # =========================================================================
    # Entry point
    # =========================================================================

    def verify(self) -> list[VerificationResult]:
        results = [self.verify_number_of_subnets()]
        results.extend(self.verify_loadbalancer_subnets())
        results.extend(self.verify_subnet_tags())
        results.extend(self.verify_loadbalancer_eni_subnets())
        results.append(self.verify_subnet_routetables())
        return results
