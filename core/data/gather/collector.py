"""
core/data/gather/collector.py - Cluster snapshot collector

Fans the resource families out on a thread pool and only returns once
every task has finished. If any task fails the first error is re-raised
and no ClusterData is built, so the checks never see a partial snapshot.

Each task gets its own boto3 Session from session_getter, built on the
calling thread before submission; Sessions are not shared between threads.

Tasks:
    1. load balancers (elbv2 + classic) -> their ENIs
    2. configured subnets -> all VPC subnets -> route tables
    3. hosted zones -> resource record sets
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from checks.tags import CLUSTER_TAG_PREFIX, collector_for
from core.config import DEFAULT_MAX_WORKERS
from core.exceptions import InvariantError

from ..types import (
    ClusterData,
    ClusterInfo,
    HostedZoneWithRecords,
    NetworkInterface,
    RouteTable,
    Subnet,
    TaggedLoadBalancer,
)
from .services import (
    collect_classic_load_balancers,
    collect_hosted_zones,
    collect_load_balancer_enis,
    collect_modern_load_balancers,
    collect_resource_records,
    collect_route_tables,
    collect_subnets_by_ids,
    collect_subnets_by_tag_key,
    collect_subnets_by_vpc,
)

if TYPE_CHECKING:
    from boto3 import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _SubnetSnapshot:
    configured: tuple[Subnet, ...]
    subnets: tuple[Subnet, ...]
    route_tables: tuple[RouteTable, ...]


def unique_subnets(subnets: list[Subnet]) -> list[Subnet]:
    """Subnets deduplicated by id, sorted by id"""
    by_id: dict[str, Subnet] = {}
    for subnet in subnets:
        by_id.setdefault(subnet.subnet_id, subnet)
    return [by_id[k] for k in sorted(by_id)]


class ClusterDataCollector:
    """Gathers a ClusterData snapshot for one cluster

    Args:
        session_getter: Returns a new boto3 Session; called once per task

    Example:
        collector = ClusterDataCollector(
            lambda: create_session(region_name="us-east-1"), cluster_info, region="us-east-1"
        )
        data = collector.collect()
    """

    def __init__(
        self,
        session_getter: Callable[[], Session],
        cluster_info: ClusterInfo,
        region: str,
        max_workers: int = DEFAULT_MAX_WORKERS,
        include_network: bool = True,
        include_hosted_zones: bool = True,
    ):
        self.session_getter = session_getter
        self.cluster_info = cluster_info
        self.region = region
        self.max_workers = max_workers
        self.include_network = include_network
        self.include_hosted_zones = include_hosted_zones
        self.tag_collector = collector_for(cluster_info)

    # =========================================================================
    # Tasks
    # =========================================================================

    def collect_load_balancers(self, session: Session) -> tuple[list[TaggedLoadBalancer], list[NetworkInterface]]:
        logger.info("Fetching load balancers")
        matches = self.tag_collector.matches_any
        lbs = collect_modern_load_balancers(session, self.region, matches)
        lbs += collect_classic_load_balancers(session, self.region, matches)
        enis: list[NetworkInterface] = []
        if self.include_network:
            enis = collect_load_balancer_enis(session, self.region, [lb.name for lb in lbs])
        return lbs, enis

    def collect_subnets(self, session: Session) -> _SubnetSnapshot:
        logger.info("Fetching configured subnets")
        info = self.cluster_info
        configured = collect_subnets_by_ids(session, self.region, info.subnet_ids)
        candidates = list(configured)
        if info.infra_name:
            candidates += collect_subnets_by_tag_key(
                session, self.region, f"{CLUSTER_TAG_PREFIX}{info.infra_name}"
            )

        vpc_ids = sorted({s.vpc_id for s in candidates if s.vpc_id})
        if len(vpc_ids) > 1:
            raise InvariantError(f"More than 1 VPC found associated with cluster subnets: {vpc_ids}")
        if not vpc_ids:
            raise InvariantError(f"No subnets found for cluster {info.cluster_id}")

        logger.info("Fetching all subnets")
        subnets = unique_subnets(candidates + collect_subnets_by_vpc(session, self.region, vpc_ids[0]))
        logger.info("Fetching all route tables")
        route_tables = collect_route_tables(session, self.region, [s.subnet_id for s in subnets])
        return _SubnetSnapshot(
            configured=tuple(unique_subnets(configured)),
            subnets=tuple(subnets),
            route_tables=tuple(route_tables),
        )

    def collect_hosted_zones(self, session: Session) -> list[HostedZoneWithRecords]:
        base_domain = self.cluster_info.base_domain
        if not base_domain:
            raise InvariantError("base_domain for cluster was empty - could not retrieve HostedZones")
        logger.info("Fetching hosted zones")
        zones = collect_hosted_zones(session, base_domain)
        return collect_resource_records(session, zones)

    # =========================================================================
    # Entry point
    # =========================================================================

    def _tasks(self) -> list[tuple[str, Callable[[Session], Any]]]:
        tasks: list[tuple[str, Callable[[Session], Any]]] = [("load_balancers", self.collect_load_balancers)]
        if self.include_network:
            tasks.append(("subnets", self.collect_subnets))
        if self.include_hosted_zones:
            tasks.append(("hosted_zones", self.collect_hosted_zones))
        return tasks

    def collect(self) -> ClusterData:
        """Run every task and build the snapshot

        Raises:
            InvariantError: inconsistent cluster resources
            APICallError: an AWS call failed
        """
        # one Session per task, all built before any task starts
        tasks = [(name, task, self.session_getter()) for name, task in self._tasks()]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: dict[str, Future[Any]] = {
                name: executor.submit(task, session) for name, task, session in tasks
            }
            wait(futures.values())

        # first failure in submission order wins
        for name, future in futures.items():
            error = future.exception()
            if error is not None:
                logger.debug("Gathering task %s failed: %s", name, error)
                raise error

        lbs, enis = futures["load_balancers"].result()
        subnet_snapshot = futures["subnets"].result() if "subnets" in futures else _SubnetSnapshot((), (), ())
        hosted_zones = futures["hosted_zones"].result() if "hosted_zones" in futures else []

        return ClusterData(
            cluster_info=self.cluster_info,
            configured_subnets=subnet_snapshot.configured,
            subnets=subnet_snapshot.subnets,
            route_tables=subnet_snapshot.route_tables,
            load_balancers=tuple(lbs),
            network_interfaces=tuple(enis),
            hosted_zones=tuple(hosted_zones),
        )
