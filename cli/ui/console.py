"""
cli/ui/console.py - Rich console utilities

Result lines, error messages and the debug tables of the gathered snapshot.
"""

from __future__ import annotations

import logging
import platform
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from checks.types import Severity, VerificationResult

if TYPE_CHECKING:
    from checks.topology import SubnetTopology
    from core.data.types import ClusterData

NOISY_LOGGERS = (
    "botocore",
    "boto3",
    "urllib3",
)

VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
}


def get_console(stderr: bool = False) -> Console:
    """Create a Rich Console instance"""
    is_windows = platform.system().lower() == "windows"

    return Console(
        stderr=stderr,
        color_system="auto",
        highlight=False,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# global console instances
console = get_console()
err_console = get_console(stderr=True)


def setup_logging(verbosity: int = 0) -> int:
    """Route the root logger through a RichHandler on stderr

    Args:
        verbosity: -v count (0: WARNING, 1: INFO, 2+: DEBUG)

    Returns:
        The configured log level
    """
    level = VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return level


# =============================================================================
# Results
# =============================================================================

SEVERITY_STYLES: dict[Severity, tuple[str, str]] = {
    Severity.OK: ("Ⓞ", "green"),
    Severity.INFO: ("Ⓘ", "blue"),
    Severity.WARNING: ("Ⓦ", "yellow"),
    Severity.CRITICAL: ("Ⓔ", "red"),
}


def format_result(result: VerificationResult) -> Text:
    """Severity marker plus message, colored by severity"""
    marker, style = SEVERITY_STYLES[result.severity]
    return Text(f"{marker} - {result.message}", style=style)


def print_results(results: list[VerificationResult]) -> None:
    for result in results:
        console.print(format_result(result))


def print_error(message: str) -> None:
    """Error message on stderr"""
    err_console.print(Text(message, style="red"))


# =============================================================================
# Debug tables
# =============================================================================


def print_table(
    title: str,
    columns: list[str],
    rows: list[list],
) -> None:
    """Print rows as a table

    Args:
        title: Table title
        columns: Column headers
        rows: Row data
    """
    table = Table(title=title, show_header=True, header_style="bold magenta")

    for column in columns:
        table.add_column(column)

    for row in rows:
        table.add_row(*[str(cell) for cell in row])

    console.print(table)


def print_cluster_data(data: ClusterData, topology: SubnetTopology) -> None:
    """Dump the gathered snapshot"""
    info = data.cluster_info
    print_table(
        "Cluster",
        ["Cluster ID", "Infra name", "Type", "BYOVPC", "Base domain"],
        [[info.cluster_id, info.infra_name, info.cluster_type.value, info.is_byovpc, info.base_domain or "-"]],
    )

    configured = {s.subnet_id for s in data.configured_subnets}
    subnet_rows = []
    for subnet in data.subnets:
        rtb = topology.route_table_for(subnet.subnet_id)
        subnet_rows.append(
            [
                subnet.subnet_id,
                subnet.name or "-",
                subnet.vpc_id,
                subnet.availability_zone,
                topology.classification(subnet.subnet_id),
                rtb.route_table_id if rtb else "-",
                "yes" if subnet.subnet_id in configured else "no",
            ]
        )
    print_table(
        "Subnets",
        ["Subnet", "Name", "VPC", "AZ", "Class", "Route table", "Configured"],
        subnet_rows,
    )

    route_rows = []
    for rtb in data.route_tables:
        for route in rtb.default_routes:
            route_rows.append([rtb.route_table_id, route.destination_cidr_block, route.target or "-"])
        if not rtb.default_routes:
            route_rows.append([rtb.route_table_id, "-", "-"])
    print_table("Route tables (default routes)", ["Route table", "Destination", "Target"], route_rows)

    lb_rows = []
    for lb in data.load_balancers:
        subnets = ", ".join(b.subnet_id for b in lb.load_balancer.availability_zones)
        lb_rows.append([lb.name, "classic" if lb.is_classic else "modern", lb.dns_name, subnets or "-"])
    print_table("Load balancers", ["Name", "Kind", "DNS name", "Subnets"], lb_rows)

    print_table(
        "Network interfaces",
        ["ENI", "Subnet", "Description"],
        [[eni.eni_id, eni.subnet_id, eni.description] for eni in data.network_interfaces],
    )

    zone_rows = []
    for zone in data.hosted_zones:
        hz = zone.hosted_zone
        zone_rows.append([hz.zone_id, hz.name, "private" if hz.private else "public", len(zone.resource_records)])
    print_table("Hosted zones", ["Zone", "Name", "Visibility", "Records"], zone_rows)
