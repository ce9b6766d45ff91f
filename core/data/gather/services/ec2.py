"""
core/data/gather/services/ec2.py - EC2 network resource collection

Collects subnets, route tables and load balancer ENIs.
API failures surface as APICallError; nothing is silently skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError

from core.exceptions import APICallError
from core.parallel import get_client

from ...types import NetworkInterface, Route, RouteTable, Subnet, Tag

if TYPE_CHECKING:
    from boto3 import Session

logger = logging.getLogger(__name__)


def parse_tags(raw: Iterable[dict[str, Any]] | None) -> tuple[Tag, ...]:
    """Tag tuple from an API Tags/TagSet list"""
    return tuple(Tag(key=t.get("Key", ""), value=t.get("Value", "")) for t in raw or [])


def _to_subnet(data: dict[str, Any]) -> Subnet:
    return Subnet(
        subnet_id=data.get("SubnetId", ""),
        availability_zone=data.get("AvailabilityZone", ""),
        vpc_id=data.get("VpcId", ""),
        tags=parse_tags(data.get("Tags")),
    )


def _to_route_table(data: dict[str, Any]) -> RouteTable:
    routes = tuple(
        Route(
            destination_cidr_block=r.get("DestinationCidrBlock", ""),
            gateway_id=r.get("GatewayId"),
            nat_gateway_id=r.get("NatGatewayId"),
            transit_gateway_id=r.get("TransitGatewayId"),
        )
        for r in data.get("Routes", [])
    )
    # main table associations carry no subnet id
    subnet_ids = tuple(a["SubnetId"] for a in data.get("Associations", []) if a.get("SubnetId"))
    return RouteTable(
        route_table_id=data.get("RouteTableId", ""),
        routes=routes,
        subnet_ids=subnet_ids,
        vpc_id=data.get("VpcId", ""),
    )


def _to_network_interface(data: dict[str, Any]) -> NetworkInterface:
    return NetworkInterface(
        eni_id=data.get("NetworkInterfaceId", ""),
        subnet_id=data.get("SubnetId", ""),
        description=data.get("Description", ""),
        vpc_id=data.get("VpcId", ""),
        private_ip=data.get("PrivateIpAddress", ""),
    )


def _describe_subnets(session: Session, region: str, **kwargs: Any) -> list[Subnet]:
    try:
        ec2 = get_client(session, "ec2", region_name=region)
        paginator = ec2.get_paginator("describe_subnets")
        subnets = []
        for page in paginator.paginate(**kwargs):
            subnets.extend(_to_subnet(s) for s in page.get("Subnets", []))
        return subnets
    except ClientError as e:
        raise APICallError.from_client_error("ec2", "describe_subnets", e) from e


def collect_subnets_by_ids(session: Session, region: str, subnet_ids: Iterable[str]) -> list[Subnet]:
    """Subnets explicitly configured for the cluster

    Args:
        session: Boto3 session
        region: AWS region
        subnet_ids: Subnet IDs (an empty list returns no subnets)

    Returns:
        List of Subnet objects
    """
    ids = list(subnet_ids)
    if not ids:
        return []
    logger.info("Retrieving configured subnets: %s", ",".join(ids))
    return _describe_subnets(session, region, SubnetIds=ids)


def collect_subnets_by_tag_key(session: Session, region: str, tag_key: str) -> list[Subnet]:
    """Subnets carrying a tag key, whatever its value"""
    logger.info("Retrieving subnets tagged with %s", tag_key)
    return _describe_subnets(session, region, Filters=[{"Name": "tag-key", "Values": [tag_key]}])


def collect_subnets_by_vpc(session: Session, region: str, vpc_id: str) -> list[Subnet]:
    """Every subnet of a VPC"""
    logger.info("Retrieving subnets for VPC: %s", vpc_id)
    return _describe_subnets(session, region, Filters=[{"Name": "vpc-id", "Values": [vpc_id]}])


def collect_route_tables(session: Session, region: str, subnet_ids: Iterable[str]) -> list[RouteTable]:
    """Route tables explicitly associated with the subnets, sorted by id

    Args:
        session: Boto3 session
        region: AWS region
        subnet_ids: Subnet IDs

    Returns:
        List of RouteTable objects
    """
    ids = sorted(set(subnet_ids))
    if not ids:
        return []
    logger.info("Retrieving route tables for subnets: %s", ",".join(ids))
    try:
        ec2 = get_client(session, "ec2", region_name=region)
        paginator = ec2.get_paginator("describe_route_tables")
        route_tables = []
        for page in paginator.paginate(Filters=[{"Name": "association.subnet-id", "Values": ids}]):
            route_tables.extend(_to_route_table(r) for r in page.get("RouteTables", []))
    except ClientError as e:
        raise APICallError.from_client_error("ec2", "describe_route_tables", e) from e
    return sorted(route_tables, key=lambda r: r.route_table_id)


def eni_description_patterns(load_balancer_names: Iterable[str]) -> list[str]:
    """ENI description filter values for the given load balancer names

    Classic load balancers use "ELB <name>", ALB/NLB use "ELB app/<name>/<id>"
    and "ELB net/<name>/<id>".
    """
    patterns = []
    for name in sorted(set(load_balancer_names)):
        if not name:
            continue
        patterns.extend([f"ELB {name}", f"ELB app/{name}/*", f"ELB net/{name}/*"])
    return patterns


def collect_load_balancer_enis(
    session: Session,
    region: str,
    load_balancer_names: Iterable[str],
) -> list[NetworkInterface]:
    """ENIs created by the given load balancers

    Args:
        session: Boto3 session
        region: AWS region
        load_balancer_names: Load balancer names

    Returns:
        List of NetworkInterface objects sorted by id
    """
    patterns = eni_description_patterns(load_balancer_names)
    if not patterns:
        return []
    logger.info("Retrieving network interfaces for %d load balancer description(s)", len(patterns))
    try:
        ec2 = get_client(session, "ec2", region_name=region)
        paginator = ec2.get_paginator("describe_network_interfaces")
        enis = []
        for page in paginator.paginate(Filters=[{"Name": "description", "Values": patterns}]):
            enis.extend(_to_network_interface(n) for n in page.get("NetworkInterfaces", []))
    except ClientError as e:
        raise APICallError.from_client_error("ec2", "describe_network_interfaces", e) from e
    return sorted(enis, key=lambda n: n.eni_id)
