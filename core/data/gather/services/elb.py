"""
core/data/gather/services/elb.py - Load Balancer resource collection

Collects ALB/NLB (elbv2) and Classic (elb) load balancers together with
their tags, keeping only those matched by the cluster tag Collector.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError

from core.exceptions import APICallError
from core.parallel import get_client

from ...types import (
    AvailabilityZoneBinding,
    ClassicLoadBalancer,
    ModernLoadBalancer,
    Tag,
    TaggedLoadBalancer,
)
from .ec2 import parse_tags

if TYPE_CHECKING:
    from boto3 import Session

logger = logging.getLogger(__name__)

# describe_tags accepts at most 20 resources per call for both APIs
TAGS_BATCH_SIZE = 20

TagFilter = Callable[[Iterable[Tag]], bool]


def _batches(items: list[str], size: int = TAGS_BATCH_SIZE) -> Iterable[list[str]]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


def _to_modern(data: dict[str, Any]) -> ModernLoadBalancer:
    return ModernLoadBalancer(
        arn=data.get("LoadBalancerArn", ""),
        name=data.get("LoadBalancerName", ""),
        dns_name=data.get("DNSName", ""),
        vpc_id=data.get("VpcId", ""),
        lb_type=data.get("Type", "application"),
        availability_zones=tuple(
            AvailabilityZoneBinding(zone_name=az.get("ZoneName", ""), subnet_id=az.get("SubnetId", ""))
            for az in data.get("AvailabilityZones", [])
        ),
    )


def _to_classic(data: dict[str, Any]) -> ClassicLoadBalancer:
    # classic descriptions list subnets without their zone
    return ClassicLoadBalancer(
        name=data.get("LoadBalancerName", ""),
        dns_name=data.get("DNSName", ""),
        vpc_id=data.get("VPCId", ""),
        availability_zones=tuple(AvailabilityZoneBinding(zone_name="", subnet_id=s) for s in data.get("Subnets", [])),
    )


def collect_modern_load_balancers(
    session: Session,
    region: str,
    tag_filter: TagFilter,
) -> list[TaggedLoadBalancer]:
    """ALB/NLB/GWLB in a region whose tags satisfy tag_filter

    Args:
        session: Boto3 session
        region: AWS region
        tag_filter: Predicate over the tag list (usually Collector.matches_any)

    Returns:
        List of TaggedLoadBalancer objects sorted by name
    """
    elbv2 = get_client(session, "elbv2", region_name=region)
    by_arn: dict[str, ModernLoadBalancer] = {}
    try:
        paginator = elbv2.get_paginator("describe_load_balancers")
        for page in paginator.paginate():
            for data in page.get("LoadBalancers", []):
                lb = _to_modern(data)
                by_arn[lb.arn] = lb
    except ClientError as e:
        raise APICallError.from_client_error("elbv2", "describe_load_balancers", e) from e

    matched = []
    try:
        for batch in _batches(sorted(by_arn)):
            response = elbv2.describe_tags(ResourceArns=batch)
            for desc in response.get("TagDescriptions", []):
                arn = desc.get("ResourceArn", "")
                tags = parse_tags(desc.get("Tags"))
                logger.debug("Checking load balancer %s tags: %s", arn, tags)
                if arn in by_arn and tag_filter(tags):
                    matched.append(TaggedLoadBalancer(load_balancer=by_arn[arn], tags=tags))
    except ClientError as e:
        raise APICallError.from_client_error("elbv2", "describe_tags", e) from e

    logger.info("Found %d cluster load balancer(s) (elbv2) out of %d", len(matched), len(by_arn))
    return sorted(matched, key=lambda t: t.name)


def collect_classic_load_balancers(
    session: Session,
    region: str,
    tag_filter: TagFilter,
) -> list[TaggedLoadBalancer]:
    """Classic Load Balancers in a region whose tags satisfy tag_filter

    Args:
        session: Boto3 session
        region: AWS region
        tag_filter: Predicate over the tag list (usually Collector.matches_any)

    Returns:
        List of TaggedLoadBalancer objects sorted by name
    """
    elb = get_client(session, "elb", region_name=region)
    by_name: dict[str, ClassicLoadBalancer] = {}
    try:
        paginator = elb.get_paginator("describe_load_balancers")
        for page in paginator.paginate():
            for data in page.get("LoadBalancerDescriptions", []):
                lb = _to_classic(data)
                by_name[lb.name] = lb
    except ClientError as e:
        raise APICallError.from_client_error("elb", "describe_load_balancers", e) from e

    matched = []
    try:
        for batch in _batches(sorted(by_name)):
            response = elb.describe_tags(LoadBalancerNames=batch)
            for desc in response.get("TagDescriptions", []):
                name = desc.get("LoadBalancerName", "")
                tags = parse_tags(desc.get("Tags"))
                logger.debug("Checking classic load balancer %s tags: %s", name, tags)
                if name in by_name and tag_filter(tags):
                    matched.append(TaggedLoadBalancer(load_balancer=by_name[name], tags=tags))
    except ClientError as e:
        raise APICallError.from_client_error("elb", "describe_tags", e) from e

    logger.info("Found %d cluster load balancer(s) (classic) out of %d", len(matched), len(by_name))
    return sorted(matched, key=lambda t: t.name)
