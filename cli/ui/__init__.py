# cli/ui - console output (rich)
"""
Console output components

Result rendering, error output, debug tables and logging setup.
"""

from .console import (
    SEVERITY_STYLES,
    console,
    err_console,
    format_result,
    get_console,
    print_cluster_data,
    print_error,
    print_results,
    print_table,
    setup_logging,
)

__all__ = [
    "SEVERITY_STYLES",
    "console",
    "err_console",
    "format_result",
    "get_console",
    "print_cluster_data",
    "print_error",
    "print_results",
    "print_table",
    "setup_logging",
]
