"""
tests/conftest.py - shared pytest fixtures

AWS mocking and builders for snapshot objects.

Usage:
    def test_something(mock_boto3_session, make_subnet, make_route_table):
        subnet = make_subnet("subnet-1", tags={"Name": "a"})
        rtb = make_route_table("rtb-1", ["subnet-1"], gateway_id="igw-1")
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, patch

import pytest

# put the project root on sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.data.types import (  # noqa: E402
    AliasTarget,
    AvailabilityZoneBinding,
    ClassicLoadBalancer,
    ClusterInfo,
    HostedZone,
    HostedZoneWithRecords,
    ModernLoadBalancer,
    NetworkInterface,
    ResourceRecordSet,
    Route,
    RouteTable,
    Subnet,
    Tag,
    TaggedLoadBalancer,
)

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Test environment variables"""
    os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

    yield


# =============================================================================
# AWS mocking
# =============================================================================


@pytest.fixture
def mock_boto3_session():
    """boto3.Session mock"""
    with patch("boto3.Session") as mock_session_class:
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        mock_session.client.return_value = MagicMock()
        mock_session.region_name = "us-east-1"

        yield mock_session


def make_paginated_client(pages_by_operation: Dict[str, list]) -> MagicMock:
    """Client mock whose get_paginator(op).paginate() yields the given pages"""
    client = MagicMock()

    def get_paginator(operation):
        paginator = MagicMock()
        paginator.paginate.return_value = pages_by_operation.get(operation, [])
        return paginator

    client.get_paginator.side_effect = get_paginator
    return client


@pytest.fixture
def paginated_client():
    return make_paginated_client


# =============================================================================
# Snapshot builders
# =============================================================================


@pytest.fixture
def make_subnet():
    def _make(
        subnet_id: str,
        az: str = "us-east-1a",
        vpc_id: str = "vpc-1",
        tags: Optional[Dict[str, str]] = None,
    ) -> Subnet:
        return Subnet(
            subnet_id=subnet_id,
            availability_zone=az,
            vpc_id=vpc_id,
            tags=tuple(Tag(k, v) for k, v in (tags or {}).items()),
        )

    return _make


@pytest.fixture
def make_route_table():
    def _make(
        route_table_id: str,
        subnet_ids: list,
        gateway_id: Optional[str] = None,
        nat_gateway_id: Optional[str] = None,
        transit_gateway_id: Optional[str] = None,
        default_route: bool = True,
    ) -> RouteTable:
        routes = [Route(destination_cidr_block="10.0.0.0/16", gateway_id="local")]
        if default_route:
            routes.append(
                Route(
                    destination_cidr_block="0.0.0.0/0",
                    gateway_id=gateway_id,
                    nat_gateway_id=nat_gateway_id,
                    transit_gateway_id=transit_gateway_id,
                )
            )
        return RouteTable(route_table_id=route_table_id, routes=tuple(routes), subnet_ids=tuple(subnet_ids))

    return _make


@pytest.fixture
def make_modern_lb():
    def _make(
        name: str,
        bindings: Optional[Dict[str, str]] = None,
        dns_name: Optional[str] = None,
        tags: Optional[Dict[str, str]] = None,
    ) -> TaggedLoadBalancer:
        lb = ModernLoadBalancer(
            arn=f"arn:aws:elasticloadbalancing:us-east-1:123456789012:loadbalancer/net/{name}/abc",
            name=name,
            dns_name=dns_name if dns_name is not None else f"{name}-123.elb.us-east-1.amazonaws.com",
            vpc_id="vpc-1",
            availability_zones=tuple(
                AvailabilityZoneBinding(zone_name=az, subnet_id=sid) for az, sid in (bindings or {}).items()
            ),
        )
        return TaggedLoadBalancer(load_balancer=lb, tags=tuple(Tag(k, v) for k, v in (tags or {}).items()))

    return _make


@pytest.fixture
def make_classic_lb():
    def _make(name: str, subnet_ids: Optional[list] = None, dns_name: Optional[str] = None) -> TaggedLoadBalancer:
        lb = ClassicLoadBalancer(
            name=name,
            dns_name=dns_name if dns_name is not None else f"{name}-456.us-east-1.elb.amazonaws.com",
            vpc_id="vpc-1",
            availability_zones=tuple(AvailabilityZoneBinding("", s) for s in subnet_ids or []),
        )
        return TaggedLoadBalancer(load_balancer=lb)

    return _make


@pytest.fixture
def make_eni():
    def _make(eni_id: str, subnet_id: str, description: str) -> NetworkInterface:
        return NetworkInterface(eni_id=eni_id, subnet_id=subnet_id, description=description)

    return _make


@pytest.fixture
def make_hosted_zone():
    def _make(zone_id: str, name: str = "example.com.", aliases: Optional[Dict[str, str]] = None):
        records = [ResourceRecordSet(name=name, type="SOA")]
        for record_name, target in (aliases or {}).items():
            records.append(ResourceRecordSet(name=record_name, type="A", alias_target=AliasTarget(dns_name=target)))
        return HostedZoneWithRecords(hosted_zone=HostedZone(zone_id=zone_id, name=name), resource_records=tuple(records))

    return _make


@pytest.fixture
def cluster_info():
    """Classic BYOVPC cluster"""
    return ClusterInfo(
        cluster_id="abc123",
        infra_name="mycluster-x7k2p",
        subnet_ids=("subnet-a", "subnet-b"),
        base_domain="p1.openshiftapps.com",
    )


# =============================================================================
# Utilities
# =============================================================================


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation: str = "TestOperation",
) -> Exception:
    """ClientError helper"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation,
    )


@pytest.fixture
def client_error():
    return create_mock_client_error


def describe_cluster_json(**overrides: Any) -> Dict[str, Any]:
    """`ocm describe cluster --json` document of a ROSA BYOVPC cluster"""
    doc: Dict[str, Any] = {
        "id": "abc123",
        "infra_id": "mycluster-x7k2p",
        "product": {"id": "rosa"},
        "cloud_provider": {"id": "aws"},
        "aws": {"subnet_ids": ["subnet-a", "subnet-b"]},
        "api": {"url": "https://api.mycluster.x7k2.p1.openshiftapps.com:6443"},
        "hypershift": {"enabled": False},
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def cluster_json():
    return describe_cluster_json
