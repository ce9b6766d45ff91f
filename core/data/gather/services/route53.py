"""
core/data/gather/services/route53.py - Route 53 hosted zone collection

Collects the hosted zones of the cluster base domain and their record sets.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError

from core.exceptions import APICallError
from core.parallel import get_client

from ...types import AliasTarget, HostedZone, HostedZoneWithRecords, ResourceRecordSet

if TYPE_CHECKING:
    from boto3 import Session

logger = logging.getLogger(__name__)


def _to_hosted_zone(data: dict[str, Any]) -> HostedZone:
    return HostedZone(
        zone_id=data.get("Id", ""),
        name=data.get("Name", ""),
        private=bool(data.get("Config", {}).get("PrivateZone", False)),
    )


def _to_record_set(data: dict[str, Any]) -> ResourceRecordSet:
    alias = data.get("AliasTarget")
    return ResourceRecordSet(
        name=data.get("Name", ""),
        type=data.get("Type", ""),
        alias_target=(
            AliasTarget(dns_name=alias.get("DNSName", ""), hosted_zone_id=alias.get("HostedZoneId", ""))
            if alias
            else None
        ),
    )


def collect_hosted_zones(session: Session, base_domain: str) -> list[HostedZone]:
    """Hosted zones whose name contains the base domain

    Args:
        session: Boto3 session
        base_domain: Cluster base domain

    Returns:
        List of HostedZone objects
    """
    logger.debug("Fetching hosted zones for base domain: %s", base_domain)
    try:
        route53 = get_client(session, "route53")
        paginator = route53.get_paginator("list_hosted_zones")
        zones = []
        for page in paginator.paginate():
            for data in page.get("HostedZones", []):
                zone = _to_hosted_zone(data)
                if base_domain in zone.name:
                    zones.append(zone)
    except ClientError as e:
        raise APICallError.from_client_error("route53", "list_hosted_zones", e) from e
    return zones


def collect_resource_records(session: Session, zones: list[HostedZone]) -> list[HostedZoneWithRecords]:
    """Record sets of every zone"""
    try:
        route53 = get_client(session, "route53")
        paginator = route53.get_paginator("list_resource_record_sets")
        result = []
        for zone in zones:
            logger.debug("Fetching resource record sets for hosted zone: %s", zone.zone_id)
            records = []
            for page in paginator.paginate(HostedZoneId=zone.zone_id):
                records.extend(_to_record_set(r) for r in page.get("ResourceRecordSets", []))
            result.append(HostedZoneWithRecords(hosted_zone=zone, resource_records=tuple(records)))
    except ClientError as e:
        raise APICallError.from_client_error("route53", "list_resource_record_sets", e) from e
    return result
