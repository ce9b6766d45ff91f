"""
core/data/types.py - Snapshot dataclasses for cluster network resources

Immutable records handed from the gathering layer to the verifiers.
Every record is a frozen dataclass; collections are tuples so a snapshot
cannot be changed once it has been built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

DEFAULT_ROUTE_CIDR = "0.0.0.0/0"

# ENI descriptions created by ELB follow "ELB <name>" (classic) and
# "ELB app/<name>/<id>" / "ELB net/<name>/<id>" (ALB/NLB).
ELB_ENI_DESCRIPTION_PREFIX = "ELB "


@dataclass(frozen=True)
class Tag:
    """A single key/value resource tag"""

    key: str
    value: str = ""


@dataclass(frozen=True)
class Subnet:
    """Subnet information

    Attributes:
        subnet_id: Subnet ID
        availability_zone: Availability zone name
        vpc_id: Owning VPC ID
        tags: Tags in the order returned by the API
    """

    subnet_id: str
    availability_zone: str
    vpc_id: str = ""
    tags: tuple[Tag, ...] = ()

    @property
    def tag_keys(self) -> list[str]:
        return [t.key for t in self.tags]

    @property
    def name(self) -> str:
        for tag in self.tags:
            if tag.key == "Name":
                return tag.value
        return ""


@dataclass(frozen=True)
class Route:
    """A single route table entry"""

    destination_cidr_block: str = ""
    gateway_id: str | None = None
    nat_gateway_id: str | None = None
    transit_gateway_id: str | None = None

    @property
    def is_default(self) -> bool:
        return self.destination_cidr_block == DEFAULT_ROUTE_CIDR

    @property
    def target(self) -> str:
        """Next hop of the route, whichever kind it is"""
        return self.gateway_id or self.nat_gateway_id or self.transit_gateway_id or ""


@dataclass(frozen=True)
class RouteTable:
    """Route table information

    Attributes:
        route_table_id: Route table ID
        routes: Route entries
        subnet_ids: Subnets explicitly associated with the table
        vpc_id: Owning VPC ID
    """

    route_table_id: str
    routes: tuple[Route, ...] = ()
    subnet_ids: tuple[str, ...] = ()
    vpc_id: str = ""

    def is_associated_with(self, subnet_id: str) -> bool:
        return subnet_id in self.subnet_ids

    @property
    def default_routes(self) -> list[Route]:
        return [r for r in self.routes if r.is_default]


@dataclass(frozen=True)
class AvailabilityZoneBinding:
    """Availability zone to subnet placement of a load balancer"""

    zone_name: str
    subnet_id: str


@dataclass(frozen=True)
class ClassicLoadBalancer:
    """Classic (ELBv1) load balancer"""

    name: str
    dns_name: str = ""
    vpc_id: str = ""
    availability_zones: tuple[AvailabilityZoneBinding, ...] = ()


@dataclass(frozen=True)
class ModernLoadBalancer:
    """Application/Network (ELBv2) load balancer"""

    arn: str
    name: str
    dns_name: str = ""
    vpc_id: str = ""
    lb_type: str = "network"
    availability_zones: tuple[AvailabilityZoneBinding, ...] = ()


LoadBalancer = Union[ClassicLoadBalancer, ModernLoadBalancer]


@dataclass(frozen=True)
class TaggedLoadBalancer:
    """A load balancer together with its tags (fetched in a separate call)"""

    load_balancer: LoadBalancer
    tags: tuple[Tag, ...] = ()

    @property
    def name(self) -> str:
        return self.load_balancer.name

    @property
    def dns_name(self) -> str:
        return self.load_balancer.dns_name

    @property
    def is_classic(self) -> bool:
        lb = self.load_balancer
        if isinstance(lb, ClassicLoadBalancer):
            return True
        if isinstance(lb, ModernLoadBalancer):
            return False
        raise TypeError(f"Unknown load balancer variant: {type(lb).__name__}")


@dataclass(frozen=True)
class NetworkInterface:
    """Elastic Network Interface (ENI) information"""

    eni_id: str
    subnet_id: str
    description: str = ""
    vpc_id: str = ""
    private_ip: str = ""

    @property
    def load_balancer_name(self) -> str | None:
        """Name of the load balancer owning this ENI, derived from its description"""
        if not self.description.startswith(ELB_ENI_DESCRIPTION_PREFIX):
            return None
        rest = self.description[len(ELB_ENI_DESCRIPTION_PREFIX) :].strip()
        parts = rest.split("/")
        if len(parts) == 3 and parts[0] in ("app", "net", "gwy"):
            return parts[1]
        return rest or None


@dataclass(frozen=True)
class HostedZone:
    """Route 53 hosted zone"""

    zone_id: str
    name: str
    private: bool = False


@dataclass(frozen=True)
class AliasTarget:
    """Alias target of a resource record set"""

    dns_name: str
    hosted_zone_id: str = ""


@dataclass(frozen=True)
class ResourceRecordSet:
    """Route 53 resource record set"""

    name: str
    type: str = "A"
    alias_target: AliasTarget | None = None


@dataclass(frozen=True)
class HostedZoneWithRecords:
    """A hosted zone plus all of its resource record sets"""

    hosted_zone: HostedZone
    resource_records: tuple[ResourceRecordSet, ...] = ()

    def alias_targets(self) -> list[tuple[str, str]]:
        """(record name, alias target DNS name) for every alias record"""
        return [(r.name, r.alias_target.dns_name) for r in self.resource_records if r.alias_target is not None]


class ClusterType(Enum):
    """Cluster product

    Attributes:
        OSD: conventional managed cluster
        ROSA: self-managed (customer account) cluster
        HYPERSHIFT: hosted control plane cluster
    """

    OSD = "osd"
    ROSA = "rosa"
    HYPERSHIFT = "hypershift"


@dataclass(frozen=True)
class ClusterInfo:
    """Minimal cluster metadata needed to run the checks

    Attributes:
        cluster_id: Cluster identifier
        infra_name: Infrastructure name used in ownership tags
        cluster_type: Product of the cluster
        cloud_provider: Cloud provider id (only "aws" is supported)
        subnet_ids: Explicitly configured subnets; non-empty means BYOVPC
        base_domain: Base DNS domain, used to find the hosted zones
    """

    cluster_id: str
    infra_name: str = ""
    cluster_type: ClusterType = ClusterType.OSD
    cloud_provider: str = "aws"
    subnet_ids: tuple[str, ...] = ()
    base_domain: str | None = None

    @property
    def is_byovpc(self) -> bool:
        return len(self.subnet_ids) > 0


@dataclass(frozen=True)
class ClusterData:
    """Everything gathered for one verification pass

    All collections reflect a single logical snapshot; the gatherer only
    builds this once every resource family has been fetched.
    """

    cluster_info: ClusterInfo
    configured_subnets: tuple[Subnet, ...] = ()
    subnets: tuple[Subnet, ...] = ()
    route_tables: tuple[RouteTable, ...] = ()
    load_balancers: tuple[TaggedLoadBalancer, ...] = ()
    network_interfaces: tuple[NetworkInterface, ...] = ()
    hosted_zones: tuple[HostedZoneWithRecords, ...] = field(default_factory=tuple)
