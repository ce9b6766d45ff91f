"""Per-service resource collectors (EC2, ELB/ELBv2, Route 53)"""

from .ec2 import (
    collect_load_balancer_enis,
    collect_route_tables,
    collect_subnets_by_ids,
    collect_subnets_by_tag_key,
    collect_subnets_by_vpc,
)
from .elb import collect_classic_load_balancers, collect_modern_load_balancers
from .route53 import collect_hosted_zones, collect_resource_records

__all__ = [
    # EC2
    "collect_load_balancer_enis",
    "collect_route_tables",
    "collect_subnets_by_ids",
    "collect_subnets_by_tag_key",
    "collect_subnets_by_vpc",
    # ELB
    "collect_classic_load_balancers",
    "collect_modern_load_balancers",
    # Route 53
    "collect_hosted_zones",
    "collect_resource_records",
]
