"""Translation of botocore failures into s3mini errors.

This is the only module that knows how S3 words its region errors. The
wording is an external interface, so every pattern lives here and callers
only ever see the typed exceptions from ``s3mini.core.exceptions``.
"""

import re
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError, NoRegionError

from s3mini.core.exceptions import (
    AuthorizationRegionError,
    BucketRegionError,
    ListingError,
    MissingRegionError,
    S3MiniError,
)

REGION = r"[a-z]{2}(?:-[a-z]+)+-\d+"

BUCKET_REGION_PATTERN = (
    rf"incorrect region, the bucket is not in '(?P<wrong_region>{REGION})' region"
)
AUTHORIZATION_REGION_PATTERN = (
    rf"the region '(?P<wrong_region>{REGION})' is wrong; "
    rf"expecting '(?P<correct_region>{REGION})'"
)

MISSING_REGION_CODES = frozenset({"MissingRegion"})
BUCKET_REGION_CODES = frozenset({"BucketRegionError", "PermanentRedirect"})
AUTHORIZATION_REGION_CODES = frozenset({"AuthorizationHeaderMalformed"})


def extract_error_details(pattern: str, message: str) -> dict[str, str]:
    """Return the named groups of ``pattern`` found in ``message``.

    Groups that did not participate in the match are left out, and a message
    that does not match at all yields an empty dict.
    """
    match = re.search(pattern, message)
    if match is None:
        return {}
    return {name: value for name, value in match.groupdict().items() if value}


def translate_client_error(
    error: Exception, s3_uri: Optional[str] = None
) -> S3MiniError:
    """Map a botocore exception onto the s3mini error hierarchy.

    Args:
        error: Exception raised by a boto3 call
        s3_uri: Address being listed when the error occurred

    Returns:
        The typed error to raise in its place
    """
    if isinstance(error, NoRegionError):
        return MissingRegionError(s3_uri=s3_uri)

    if isinstance(error, ClientError):
        response = error.response or {}
        code = response.get("Error", {}).get("Code", "")
        message = response.get("Error", {}).get("Message", "") or str(error)

        if code in MISSING_REGION_CODES:
            return MissingRegionError(s3_uri=s3_uri)

        if code in BUCKET_REGION_CODES:
            details = extract_error_details(BUCKET_REGION_PATTERN, message)
            headers = response.get("ResponseMetadata", {}).get("HTTPHeaders", {})
            bucket_region = headers.get("x-amz-bucket-region")
            if bucket_region:
                details["bucket_region"] = bucket_region
            return BucketRegionError(s3_uri=s3_uri, details=details)

        if code in AUTHORIZATION_REGION_CODES:
            details = extract_error_details(AUTHORIZATION_REGION_PATTERN, message)
            return AuthorizationRegionError(s3_uri=s3_uri, details=details)

        return ListingError(str(error), s3_uri=s3_uri)

    if isinstance(error, BotoCoreError):
        return ListingError(str(error), s3_uri=s3_uri)

    return ListingError(f"Unexpected listing failure: {error}", s3_uri=s3_uri)
