"""
cli/app.py - Main CLI entry point

Click based entry point. Looks the cluster up through ocm, gathers its AWS
network resources and prints the verification results.

Command:
    byovpc-checker -c <cluster id>                  # all checks
    byovpc-checker -c <cluster id> --checks network # network checks only
    byovpc-checker -c <cluster id> -o debug -vv     # dump gathered data, debug logs
    byovpc-checker --version

Exit codes:
    0: checks ran (whatever the findings)
    1: missing cluster id, unsupported cluster or gathering failed

Usage:
    $ byovpc-checker -c 2abc...
    $ python -m cli.app -c 2abc...
"""

import logging

import click
from botocore.exceptions import BotoCoreError

from checks import HostedZoneVerifier, NetworkVerifier, NetworkVerifierConfig, VerificationResult
from cli.ui import print_cluster_data, print_error, print_results, setup_logging
from core.config import Settings, get_version
from core.data import get_cluster_info
from core.data.gather import ClusterDataCollector
from core.exceptions import CheckerError, UnsupportedCloudProviderError, is_access_denied, is_throttling
from core.parallel import create_session

logger = logging.getLogger(__name__)

VERSION = get_version()

CHECKS_ALL = "all"
CHECKS_NETWORK = "network"
CHECKS_HOSTED_ZONE = "hosted-zone"

OUTPUT_CHECKS = "checks"
OUTPUT_DEBUG = "debug"

SUPPORTED_CLOUD_PROVIDER = "aws"


def run_checks(
    cluster_id: str,
    checks: str = CHECKS_ALL,
    output: str = OUTPUT_CHECKS,
    profile: str | None = None,
    region: str | None = None,
    settings: Settings | None = None,
) -> list[VerificationResult]:
    """Gather the cluster snapshot and run the selected verifiers

    Raises:
        CheckerError: cluster metadata, invariant or AWS API failure
    """
    settings = settings or Settings.from_env()
    cluster_info = get_cluster_info(cluster_id, settings)
    if cluster_info.cloud_provider.lower() != SUPPORTED_CLOUD_PROVIDER:
        raise UnsupportedCloudProviderError(cluster_id, cluster_info.cloud_provider)

    region = region or settings.default_region
    logger.info("Using region %s", region)

    def session_getter():
        return create_session(profile=profile, region_name=region)

    run_network = checks in (CHECKS_ALL, CHECKS_NETWORK)
    run_hosted_zone = checks in (CHECKS_ALL, CHECKS_HOSTED_ZONE)
    collector = ClusterDataCollector(
        session_getter,
        cluster_info,
        region=region,
        max_workers=settings.max_workers,
        include_network=run_network,
        include_hosted_zones=run_hosted_zone,
    )
    data = collector.collect()

    results: list[VerificationResult] = []
    network = None
    if run_network:
        network = NetworkVerifier(NetworkVerifierConfig.from_cluster_data(data))
        results.extend(network.verify())
    if run_hosted_zone:
        results.extend(HostedZoneVerifier(data.hosted_zones, data.load_balancers).verify())

    if output == OUTPUT_DEBUG:
        if network is None:
            network = NetworkVerifier(NetworkVerifierConfig.from_cluster_data(data))
        print_cluster_data(data, network.topology)
    return results


@click.command(name="byovpc-checker", context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-c", "--clusterid", "cluster_id", default="", help="Cluster ID to verify")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug)")
@click.option(
    "--checks",
    type=click.Choice([CHECKS_ALL, CHECKS_NETWORK, CHECKS_HOSTED_ZONE]),
    default=CHECKS_ALL,
    show_default=True,
    help="Checks to run",
)
@click.option(
    "-o",
    "--output",
    type=click.Choice([OUTPUT_CHECKS, OUTPUT_DEBUG]),
    default=OUTPUT_CHECKS,
    show_default=True,
    help="Output format",
)
@click.option("-p", "--profile", default=None, help="AWS profile")
@click.option("-r", "--region", default=None, help="AWS region (default: AWS environment, else us-east-1)")
@click.version_option(version=VERSION, prog_name="byovpc-checker")
def cli(
    cluster_id: str,
    verbose: int,
    checks: str,
    output: str,
    profile: str | None,
    region: str | None,
) -> None:
    """Verifies if the VPC setup for the cluster is valid"""
    setup_logging(verbose)

    if not cluster_id.strip():
        print_error("Must set a clusterid to proceed.")
        raise SystemExit(1)

    try:
        results = run_checks(cluster_id.strip(), checks=checks, output=output, profile=profile, region=region)
    except CheckerError as e:
        logger.debug("Aborting: %s", e.to_dict())
        print_error(str(e))
        if is_access_denied(e):
            print_error("Check that the AWS credentials have read access to EC2, ELB and Route 53.")
        elif is_throttling(e):
            print_error("AWS throttled the requests. Retry later or lower BYOVPC_MAX_WORKERS.")
        raise SystemExit(1) from e
    except BotoCoreError as e:
        print_error(f"AWS error: {e}")
        raise SystemExit(1) from e

    print_results(results)


if __name__ == "__main__":
    cli()
