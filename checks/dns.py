"""
checks/dns.py - Hosted zone verifier

A cluster is expected to have exactly two hosted zones (public and
private) whose alias records point at the cluster load balancers, and no
alias record should point at a load balancer the cluster does not own.

Load balancer DNS names are matched case-insensitively by containment,
since alias targets carry a trailing dot and sometimes a "dualstack." prefix.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from core.data.types import HostedZoneWithRecords, TaggedLoadBalancer

from .types import VerificationResult

logger = logging.getLogger(__name__)

EXPECTED_HOSTED_ZONES = 2


class HostedZoneVerifier:
    """Checks hosted zone count and alias record usage

    Args:
        hosted_zones: Cluster hosted zones with their record sets
        load_balancers: Cluster load balancers
    """

    def __init__(
        self,
        hosted_zones: Sequence[HostedZoneWithRecords] = (),
        load_balancers: Sequence[TaggedLoadBalancer] = (),
    ):
        self.hosted_zones = tuple(hosted_zones)
        self.load_balancers = tuple(load_balancers)

    def _record_targets(self) -> list[tuple[str, str]]:
        targets = []
        for zone in self.hosted_zones:
            targets.extend(zone.alias_targets())
        return targets

    def _load_balancer_dns_names(self) -> list[str]:
        names = []
        for lb in self.load_balancers:
            if not lb.dns_name.strip():
                logger.debug("Skipping load balancer %s without DNS name", lb.name)
                continue
            names.append(lb.dns_name)
        return names

    def verify_number_of_hosted_zones(self) -> VerificationResult:
        count = len(self.hosted_zones)
        if count < EXPECTED_HOSTED_ZONES:
            return VerificationResult.critical(f"Too few hosted zones found: {count}", "hosted_zone_count")
        if count == EXPECTED_HOSTED_ZONES:
            return VerificationResult.ok(
                f"Expected number of hosted zones found: {EXPECTED_HOSTED_ZONES}", "hosted_zone_count"
            )
        return VerificationResult.critical(f"Too many hosted zones found: {count}", "hosted_zone_count")

    def verify_load_balancers_are_used(self) -> list[VerificationResult]:
        logger.info("Checking that load balancers are used in hosted zones")
        targets = self._record_targets()
        dns_names = self._load_balancer_dns_names()
        if not dns_names:
            return [VerificationResult.ok("No load balancers to check against hosted zones", "loadbalancer_used")]

        results = []
        for lb in dns_names:
            needle = lb.lower()
            record = next((name for name, target in targets if needle in target.lower()), None)
            if record is None:
                results.append(
                    VerificationResult.warning(
                        f"LoadBalancer '{lb}' is not being used in any hosted zone", "loadbalancer_unused"
                    )
                )
            else:
                results.append(VerificationResult.ok(f"LoadBalancer {lb} is used in record {record}", "loadbalancer_used"))
        return results

    def verify_only_known_load_balancers_are_used(self) -> list[VerificationResult]:
        logger.info("Checking that hosted zone records only use cluster load balancers")
        known = [n.lower() for n in self._load_balancer_dns_names()]
        results = []
        for name, target in self._record_targets():
            lowered = target.lower()
            if any(lb in lowered for lb in known):
                continue
            results.append(
                VerificationResult.warning(
                    f"ResourceRecord '{name}' is using a LoadBalancer not associated with the cluster: {target}",
                    "record_unknown_loadbalancer",
                )
            )
        if not results:
            results.append(
                VerificationResult.ok(
                    "All hosted zone alias records use cluster load balancers", "record_known_loadbalancers"
                )
            )
        return results

    def verify(self) -> list[VerificationResult]:
        results = self.verify_load_balancers_are_used()
        results.append(self.verify_number_of_hosted_zones())
        results.extend(self.verify_only_known_load_balancers_are_used())
        return results
