"""Exception hierarchy for s3mini."""

from typing import Optional


class S3MiniError(Exception):
    """Base exception for all s3mini errors."""

    pass


class ValidationError(S3MiniError):
    """Raised when validation fails."""

    pass


class CommandExecutionError(S3MiniError):
    """Raised when command execution fails."""

    pass


class ListingError(S3MiniError):
    """Raised when the store rejects a listing call.

    Attributes:
        s3_uri: Address whose listing failed, if known
    """

    def __init__(self, message: str, s3_uri: Optional[str] = None):
        super().__init__(message)
        self.s3_uri = s3_uri


class RegionError(ListingError):
    """Raised when a listing fails because of region configuration.

    Attributes:
        details: Region names extracted from the backend message, keyed by
            ``wrong_region``, ``correct_region`` or ``bucket_region``
    """

    default_message = "Region configuration error"

    def __init__(
        self,
        message: Optional[str] = None,
        s3_uri: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
    ):
        super().__init__(message or self.default_message, s3_uri=s3_uri)
        self.details = details or {}

    def __str__(self) -> str:
        message = super().__str__()
        if not self.details:
            return message
        detail = ", ".join(f"{name}={value}" for name, value in self.details.items())
        return f"{message} ({detail})"


class MissingRegionError(RegionError):
    """Raised when no region is configured for the client."""

    default_message = (
        "Could not find a region set, please set with AWS_REGION "
        "or within your AWS configuration"
    )


class BucketRegionError(RegionError):
    """Raised when the bucket lives outside the client's region."""

    default_message = "Bucket region given is incorrect, try us-east-1"


class AuthorizationRegionError(RegionError):
    """Raised when the request was signed for the wrong region."""

    default_message = "Request was signed for the wrong region"
