"""
tests/checks/test_dns.py - hosted zone verifier tests
"""

import pytest

from checks.dns import HostedZoneVerifier
from checks.types import Severity


class TestVerifyNumberOfHostedZones:
    """verify_number_of_hosted_zones tests"""

    def test_two_zones_ok(self, make_hosted_zone):
        verifier = HostedZoneVerifier([make_hosted_zone("Z1"), make_hosted_zone("Z2")])
        result = verifier.verify_number_of_hosted_zones()

        assert result.severity == Severity.OK
        assert result.message == "Expected number of hosted zones found: 2"

    @pytest.mark.parametrize("count", [0, 1])
    def test_too_few(self, make_hosted_zone, count):
        verifier = HostedZoneVerifier([make_hosted_zone(f"Z{i}") for i in range(count)])
        result = verifier.verify_number_of_hosted_zones()

        assert result.severity == Severity.CRITICAL
        assert result.message == f"Too few hosted zones found: {count}"

    def test_too_many(self, make_hosted_zone):
        verifier = HostedZoneVerifier([make_hosted_zone(f"Z{i}") for i in range(3)])
        result = verifier.verify_number_of_hosted_zones()

        assert result.severity == Severity.CRITICAL
        assert result.message == "Too many hosted zones found: 3"


class TestVerifyLoadBalancersAreUsed:
    """verify_load_balancers_are_used tests"""

    def test_used_load_balancer(self, make_hosted_zone, make_modern_lb):
        lb = make_modern_lb("router", dns_name="router-123.elb.us-east-1.amazonaws.com")
        zone = make_hosted_zone("Z1", aliases={"*.apps.example.com.": "dualstack.router-123.elb.us-east-1.amazonaws.com."})
        results = HostedZoneVerifier([zone], [lb]).verify_load_balancers_are_used()

        assert len(results) == 1
        assert results[0].severity == Severity.OK
        assert results[0].message == "LoadBalancer router-123.elb.us-east-1.amazonaws.com is used in record *.apps.example.com."

    def test_case_insensitive(self, make_hosted_zone, make_modern_lb):
        lb = make_modern_lb("router", dns_name="Router-123.ELB.us-east-1.amazonaws.com")
        zone = make_hosted_zone("Z1", aliases={"api.example.com.": "router-123.elb.us-east-1.amazonaws.com."})
        results = HostedZoneVerifier([zone], [lb]).verify_load_balancers_are_used()

        assert results[0].severity == Severity.OK

    def test_unused_load_balancer(self, make_hosted_zone, make_modern_lb):
        lb = make_modern_lb("router", dns_name="router-123.elb.us-east-1.amazonaws.com")
        results = HostedZoneVerifier([make_hosted_zone("Z1")], [lb]).verify_load_balancers_are_used()

        assert results[0].severity == Severity.WARNING
        assert results[0].message == "LoadBalancer 'router-123.elb.us-east-1.amazonaws.com' is not being used in any hosted zone"

    def test_no_load_balancers(self, make_hosted_zone):
        results = HostedZoneVerifier([make_hosted_zone("Z1")], []).verify_load_balancers_are_used()

        assert [r.severity for r in results] == [Severity.OK]

    def test_blank_dns_name_skipped(self, make_hosted_zone, make_classic_lb):
        """A blank DNS name would otherwise match every record"""
        lb = make_classic_lb("classic", dns_name="")
        zone = make_hosted_zone("Z1", aliases={"a.example.com.": "foreign.elb.amazonaws.com."})
        verifier = HostedZoneVerifier([zone], [lb])

        assert [r.severity for r in verifier.verify_load_balancers_are_used()] == [Severity.OK]
        assert [r.severity for r in verifier.verify_only_known_load_balancers_are_used()] == [Severity.WARNING]


class TestVerifyOnlyKnownLoadBalancersAreUsed:
    """verify_only_known_load_balancers_are_used tests"""

    def test_unknown_target_warns(self, make_hosted_zone, make_modern_lb):
        lb = make_modern_lb("router", dns_name="router-123.elb.us-east-1.amazonaws.com")
        zone = make_hosted_zone(
            "Z1",
            aliases={
                "*.apps.example.com.": "router-123.elb.us-east-1.amazonaws.com.",
                "old.example.com.": "stale-999.elb.us-east-1.amazonaws.com.",
            },
        )
        results = HostedZoneVerifier([zone], [lb]).verify_only_known_load_balancers_are_used()

        assert len(results) == 1
        assert results[0].severity == Severity.WARNING
        assert results[0].message == (
            "ResourceRecord 'old.example.com.' is using a LoadBalancer not associated with the cluster: "
            "stale-999.elb.us-east-1.amazonaws.com."
        )

    def test_all_known(self, make_hosted_zone, make_modern_lb):
        lb = make_modern_lb("router", dns_name="router-123.elb.us-east-1.amazonaws.com")
        zone = make_hosted_zone("Z1", aliases={"*.apps.example.com.": "router-123.elb.us-east-1.amazonaws.com."})
        results = HostedZoneVerifier([zone], [lb]).verify_only_known_load_balancers_are_used()

        assert [r.severity for r in results] == [Severity.OK]


class TestVerify:
    """verify() tests"""

    def test_order_used_count_reverse(self, make_hosted_zone, make_modern_lb):
        lb = make_modern_lb("router", dns_name="router-123.elb.us-east-1.amazonaws.com")
        zones = [
            make_hosted_zone("Z1", aliases={"*.apps.example.com.": "router-123.elb.us-east-1.amazonaws.com."}),
            make_hosted_zone("Z2"),
        ]
        results = HostedZoneVerifier(zones, [lb]).verify()

        assert [r.check for r in results] == ["loadbalancer_used", "hosted_zone_count", "record_known_loadbalancers"]
        assert all(r.severity == Severity.OK for r in results)
