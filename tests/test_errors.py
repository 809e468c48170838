"""Tests for translating backend errors into s3mini errors."""

from botocore.exceptions import ClientError, EndpointConnectionError, NoRegionError

from s3mini.core.exceptions import (
    AuthorizationRegionError,
    BucketRegionError,
    ListingError,
    MissingRegionError,
)
from s3mini.objectstorage.errors import (
    AUTHORIZATION_REGION_PATTERN,
    BUCKET_REGION_PATTERN,
    extract_error_details,
    translate_client_error,
)


def client_error(code, message, headers=None):
    response = {"Error": {"Code": code, "Message": message}}
    if headers:
        response["ResponseMetadata"] = {"HTTPHeaders": headers}
    return ClientError(response, "ListObjectsV2")


class TestExtractErrorDetails:
    """Test pattern extraction from backend messages."""

    def test_authorization_message(self):
        details = extract_error_details(
            AUTHORIZATION_REGION_PATTERN,
            "The authorization header is malformed; the region 'us-east-1' is "
            "wrong; expecting 'eu-west-1'",
        )

        assert details == {"wrong_region": "us-east-1", "correct_region": "eu-west-1"}

    def test_bucket_region_message(self):
        details = extract_error_details(
            BUCKET_REGION_PATTERN,
            "incorrect region, the bucket is not in 'ap-southeast-2' region",
        )

        assert details == {"wrong_region": "ap-southeast-2"}

    def test_no_match(self):
        assert extract_error_details(BUCKET_REGION_PATTERN, "Access Denied") == {}


class TestTranslateClientError:
    """Test mapping of botocore exceptions."""

    def test_no_region(self):
        error = translate_client_error(NoRegionError(), "s3://bucket/key")

        assert isinstance(error, MissingRegionError)
        assert "AWS_REGION" in str(error)
        assert error.s3_uri == "s3://bucket/key"

    def test_missing_region_code(self):
        error = translate_client_error(client_error("MissingRegion", "no region"))
        assert isinstance(error, MissingRegionError)

    def test_authorization_header_malformed(self):
        error = translate_client_error(
            client_error(
                "AuthorizationHeaderMalformed",
                "The authorization header is malformed; the region 'us-east-1' "
                "is wrong; expecting 'eu-central-1'",
            ),
            "s3://bucket/",
        )

        assert isinstance(error, AuthorizationRegionError)
        assert error.details == {
            "wrong_region": "us-east-1",
            "correct_region": "eu-central-1",
        }
        assert "correct_region=eu-central-1" in str(error)

    def test_permanent_redirect_reads_region_header(self):
        error = translate_client_error(
            client_error(
                "PermanentRedirect",
                "The bucket you are attempting to access must be addressed "
                "using the specified endpoint.",
                headers={"x-amz-bucket-region": "eu-west-2"},
            )
        )

        assert isinstance(error, BucketRegionError)
        assert error.details == {"bucket_region": "eu-west-2"}
        assert "try us-east-1" in str(error)

    def test_other_client_errors_keep_message(self):
        error = translate_client_error(
            client_error("NoSuchBucket", "The specified bucket does not exist"),
            "s3://missing/",
        )

        assert type(error) is ListingError
        assert "The specified bucket does not exist" in str(error)

    def test_botocore_errors(self):
        error = translate_client_error(
            EndpointConnectionError(endpoint_url="http://localhost:9000")
        )

        assert type(error) is ListingError
        assert "localhost:9000" in str(error)
