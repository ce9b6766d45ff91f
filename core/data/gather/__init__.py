"""
core/data/gather - AWS resource gathering

Usage:
    from core.data.gather import ClusterDataCollector

    data = ClusterDataCollector(session, cluster_info, region="us-east-1").collect()
"""

from .collector import ClusterDataCollector, unique_subnets

__all__ = [
    "ClusterDataCollector",
    "unique_subnets",
]
