"""
core/exceptions.py - Exception hierarchy

Exceptions raised before verification starts. Findings produced by the
checks are never exceptions; they are VerificationResult entries.

Hierarchy:
    CheckerError (base)
    ├── InvariantError (inconsistent input, abort the run)
    ├── ClusterInfoError (cluster metadata unavailable)
    │   └── UnsupportedCloudProviderError
    └── APICallError (AWS API call failed)

Usage:
    from core.exceptions import APICallError

    try:
        ec2.describe_subnets(SubnetIds=subnet_ids)
    except ClientError as e:
        raise APICallError.from_client_error("ec2", "describe_subnets", e) from e
"""

from typing import Any, Dict, Optional

# =============================================================================
# Base exception
# =============================================================================


class CheckerError(Exception):
    """Base class of every error raised by the checker

    Attributes:
        message: Error message
        cause: Underlying exception (for chaining)
        details: Extra structured details
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Return the error as a dictionary"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# Input invariants
# =============================================================================


class InvariantError(CheckerError):
    """An expected property of the input did not hold

    Raised when gathered data or cluster metadata is fundamentally
    inconsistent, e.g. the cluster subnets span more than one VPC.
    """


# =============================================================================
# Cluster metadata
# =============================================================================


class ClusterInfoError(CheckerError):
    """Cluster metadata could not be retrieved or parsed"""

    def __init__(
        self,
        cluster_id: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"Cluster metadata error [{cluster_id}]: {message}"
        super().__init__(full_message, cause)
        self.cluster_id = cluster_id
        self.details["cluster_id"] = cluster_id


class UnsupportedCloudProviderError(ClusterInfoError):
    """The cluster runs on a cloud provider other than AWS"""

    def __init__(self, cluster_id: str, cloud_provider: str):
        super().__init__(
            cluster_id,
            f"This check only works for BYOVPC AWS clusters, not: {cloud_provider}",
        )
        self.cloud_provider = cloud_provider
        self.details["cloud_provider"] = cloud_provider


# =============================================================================
# AWS API calls
# =============================================================================


class APICallError(CheckerError):
    """AWS API call failure

    Wraps botocore ClientError so the CLI can report it consistently.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} failed ({error_code})"
        else:
            message = f"{message} failed"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        client_error: Exception,
    ) -> "APICallError":
        """Build from a botocore.exceptions.ClientError

        Args:
            service: AWS service name
            operation: API operation name
            client_error: The ClientError raised by botocore

        Returns:
            APICallError instance
        """
        error_code = None
        error_message = None

        if hasattr(client_error, "response"):
            error_info = client_error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            cause=client_error,
        )


# =============================================================================
# Helpers
# =============================================================================

ACCESS_DENIED_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "UnauthorizedOperation",
    "UnauthorizedAccess",
}

THROTTLING_CODES = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
    "PriorRequestNotComplete",
}


def _error_code(error: Exception) -> Optional[str]:
    if isinstance(error, APICallError):
        return error.error_code
    if hasattr(error, "response"):
        return error.response.get("Error", {}).get("Code", "")
    return None


def is_access_denied(error: Exception) -> bool:
    """Whether the error is an access denied error"""
    return _error_code(error) in ACCESS_DENIED_CODES


def is_throttling(error: Exception) -> bool:
    """Whether the error is a throttling error"""
    return _error_code(error) in THROTTLING_CODES
