"""
checks/topology.py - Subnet to route table association and classification

Public/private is not a subnet attribute in AWS; it is inferred from the
default route of the route table associated with the subnet:

    - public:  0.0.0.0/0 via an internet gateway (gateway id) or a transit gateway
    - private: no 0.0.0.0/0 route, or 0.0.0.0/0 via a NAT gateway

Both rules are evaluated independently, so a misconfigured subnet with an
IGW and a NAT default route is reported as both.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from core.data.types import RouteTable, Subnet

logger = logging.getLogger(__name__)


def build_route_table_index(
    subnets: Sequence[Subnet],
    route_tables: Sequence[RouteTable],
) -> dict[str, RouteTable]:
    """Map subnet id -> associated route table

    The first associated route table in input order wins. Subnets without
    an explicit association are left out.
    """
    index: dict[str, RouteTable] = {}
    for subnet in subnets:
        candidates = [rtb for rtb in route_tables if rtb.is_associated_with(subnet.subnet_id)]
        if not candidates:
            logger.debug("No route table associated with subnet %s", subnet.subnet_id)
            continue
        if len(candidates) > 1:
            logger.warning(
                "Subnet %s is associated with multiple route tables %s, using %s",
                subnet.subnet_id,
                [rtb.route_table_id for rtb in candidates],
                candidates[0].route_table_id,
            )
        index[subnet.subnet_id] = candidates[0]
    return index


class SubnetTopology:
    """Public/private classification of a fixed set of subnets

    Args:
        subnets: Subnets to classify
        route_tables: Route tables of the VPC
    """

    def __init__(self, subnets: Sequence[Subnet], route_tables: Sequence[RouteTable]):
        self._subnet_ids = [s.subnet_id for s in subnets]
        self._index = build_route_table_index(subnets, route_tables)

    def route_table_for(self, subnet_id: str) -> RouteTable | None:
        return self._index.get(subnet_id)

    def is_public(self, subnet_id: str) -> bool:
        rtb = self._index.get(subnet_id)
        if rtb is None:
            return False
        return any(r.gateway_id or r.transit_gateway_id for r in rtb.default_routes)

    def is_private(self, subnet_id: str) -> bool:
        rtb = self._index.get(subnet_id)
        if rtb is None:
            # no route table, so no known default route
            return True
        default_routes = rtb.default_routes
        if not default_routes:
            return True
        return any(r.nat_gateway_id for r in default_routes)

    def public_subnet_ids(self) -> list[str]:
        return sorted(s for s in self._subnet_ids if self.is_public(s))

    def private_subnet_ids(self) -> list[str]:
        return sorted(s for s in self._subnet_ids if self.is_private(s))

    def classification(self, subnet_id: str) -> str:
        """Short label used in debug output"""
        public = self.is_public(subnet_id)
        private = self.is_private(subnet_id)
        if public and private:
            return "public+private"
        if public:
            return "public"
        if private:
            return "private"
        return "unknown"
