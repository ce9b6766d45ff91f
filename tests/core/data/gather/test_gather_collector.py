"""
tests/core/data/gather/test_gather_collector.py - ClusterDataCollector tests

Service functions are patched; the tests cover task wiring, VPC invariants
and all-or-nothing failure propagation.
"""

from unittest.mock import MagicMock, patch

import pytest

from checks.tags import HostedControlPlaneCollector
from core.data.gather.collector import ClusterDataCollector, unique_subnets
from core.data.types import ClusterInfo, ClusterType, HostedZone, HostedZoneWithRecords
from core.exceptions import APICallError, InvariantError

MODULE = "core.data.gather.collector"


@pytest.fixture
def services(make_subnet, make_route_table, make_modern_lb, make_eni):
    """Patch every service function with a happy-path return value"""
    configured = [make_subnet("subnet-a", vpc_id="vpc-1"), make_subnet("subnet-b", vpc_id="vpc-1")]
    vpc_subnets = configured + [make_subnet("subnet-c", vpc_id="vpc-1")]
    zone = HostedZoneWithRecords(HostedZone("Z1", "example.com."))
    values = {
        "collect_modern_load_balancers": [make_modern_lb("router")],
        "collect_classic_load_balancers": [],
        "collect_load_balancer_enis": [make_eni("eni-1", "subnet-a", "ELB net/router/1")],
        "collect_subnets_by_ids": configured,
        "collect_subnets_by_tag_key": [make_subnet("subnet-b", vpc_id="vpc-1")],
        "collect_subnets_by_vpc": vpc_subnets,
        "collect_route_tables": [make_route_table("rtb-1", ["subnet-a"])],
        "collect_hosted_zones": [zone.hosted_zone],
        "collect_resource_records": [zone],
    }
    patchers = {name: patch(f"{MODULE}.{name}", return_value=value) for name, value in values.items()}
    mocks = {name: p.start() for name, p in patchers.items()}
    yield mocks
    for p in patchers.values():
        p.stop()


def _collector(info, **kwargs) -> ClusterDataCollector:
    return ClusterDataCollector(lambda: MagicMock(), info, region="us-east-1", **kwargs)


class TestUniqueSubnets:
    """unique_subnets tests"""

    def test_dedup_and_sort(self, make_subnet):
        subnets = [make_subnet("subnet-b"), make_subnet("subnet-a"), make_subnet("subnet-b")]
        assert [s.subnet_id for s in unique_subnets(subnets)] == ["subnet-a", "subnet-b"]


class TestClusterDataCollector:
    """ClusterDataCollector tests"""

    def test_collect_builds_snapshot(self, services, cluster_info):
        data = _collector(cluster_info).collect()

        assert data.cluster_info is cluster_info
        assert [s.subnet_id for s in data.configured_subnets] == ["subnet-a", "subnet-b"]
        assert [s.subnet_id for s in data.subnets] == ["subnet-a", "subnet-b", "subnet-c"]
        assert [r.route_table_id for r in data.route_tables] == ["rtb-1"]
        assert [lb.name for lb in data.load_balancers] == ["router"]
        assert [e.eni_id for e in data.network_interfaces] == ["eni-1"]
        assert len(data.hosted_zones) == 1

    def test_one_session_per_task_built_before_tasks_run(self, services, cluster_info):
        events = []

        def session_getter():
            events.append("session")
            return MagicMock()

        def record_task(mock):
            value = mock.return_value

            def _run(*args):
                events.append("task")
                return value

            mock.side_effect = _run

        entry_points = ("collect_modern_load_balancers", "collect_subnets_by_ids", "collect_hosted_zones")
        for name in entry_points:
            record_task(services[name])

        ClusterDataCollector(session_getter, cluster_info, region="us-east-1").collect()

        assert events == ["session"] * 3 + ["task"] * 3
        sessions = {id(services[name].call_args.args[0]) for name in entry_points}
        assert len(sessions) == 3

    def test_session_stays_within_its_task(self, services, cluster_info):
        _collector(cluster_info).collect()

        lb_session = services["collect_modern_load_balancers"].call_args.args[0]
        assert services["collect_classic_load_balancers"].call_args.args[0] is lb_session
        assert services["collect_load_balancer_enis"].call_args.args[0] is lb_session
        subnet_session = services["collect_subnets_by_ids"].call_args.args[0]
        assert services["collect_route_tables"].call_args.args[0] is subnet_session
        assert subnet_session is not lb_session

    def test_session_failure_starts_no_task(self, services, cluster_info):
        getter = MagicMock(side_effect=RuntimeError("profile not found"))

        with pytest.raises(RuntimeError):
            ClusterDataCollector(getter, cluster_info, region="us-east-1").collect()

        services["collect_modern_load_balancers"].assert_not_called()

    def test_subnet_lookups(self, services, cluster_info):
        _collector(cluster_info).collect()

        services["collect_subnets_by_tag_key"].assert_called_once()
        assert services["collect_subnets_by_tag_key"].call_args.args[2] == "kubernetes.io/cluster/mycluster-x7k2p"
        assert services["collect_subnets_by_vpc"].call_args.args[2] == "vpc-1"
        assert services["collect_route_tables"].call_args.args[2] == ["subnet-a", "subnet-b", "subnet-c"]
        assert services["collect_load_balancer_enis"].call_args.args[2] == ["router"]

    def test_hosted_zones_use_base_domain(self, services, cluster_info):
        _collector(cluster_info).collect()
        assert services["collect_hosted_zones"].call_args.args[1] == "p1.openshiftapps.com"

    def test_multiple_vpcs_is_invariant_error(self, services, cluster_info, make_subnet):
        services["collect_subnets_by_ids"].return_value = [
            make_subnet("subnet-a", vpc_id="vpc-1"),
            make_subnet("subnet-b", vpc_id="vpc-2"),
        ]

        with pytest.raises(InvariantError, match="More than 1 VPC"):
            _collector(cluster_info).collect()

    def test_no_subnets_is_invariant_error(self, services, cluster_info):
        services["collect_subnets_by_ids"].return_value = []
        services["collect_subnets_by_tag_key"].return_value = []

        with pytest.raises(InvariantError, match="No subnets found"):
            _collector(cluster_info).collect()

    def test_missing_base_domain(self, services):
        info = ClusterInfo(cluster_id="abc", infra_name="infra", subnet_ids=("subnet-a",))

        with pytest.raises(InvariantError, match="base_domain"):
            _collector(info).collect()

    def test_api_failure_propagates(self, services, cluster_info):
        services["collect_modern_load_balancers"].side_effect = APICallError("elbv2", "describe_load_balancers")

        with pytest.raises(APICallError):
            _collector(cluster_info).collect()

        # other tasks were still joined
        services["collect_route_tables"].assert_called_once()

    def test_network_only_skips_hosted_zones(self, services):
        info = ClusterInfo(cluster_id="abc", infra_name="infra", subnet_ids=("subnet-a",))
        data = _collector(info, include_hosted_zones=False).collect()

        services["collect_hosted_zones"].assert_not_called()
        assert data.hosted_zones == ()

    def test_hosted_zone_only_skips_network(self, services, cluster_info):
        data = _collector(cluster_info, include_network=False).collect()

        services["collect_subnets_by_ids"].assert_not_called()
        services["collect_load_balancer_enis"].assert_not_called()
        assert data.subnets == ()
        assert [lb.name for lb in data.load_balancers] == ["router"]

    def test_hypershift_uses_service_name_collector(self, services):
        info = ClusterInfo(
            cluster_id="abc",
            infra_name="abc",
            cluster_type=ClusterType.HYPERSHIFT,
            subnet_ids=("subnet-a",),
            base_domain="example.com",
        )
        collector = _collector(info)

        assert isinstance(collector.tag_collector, HostedControlPlaneCollector)
