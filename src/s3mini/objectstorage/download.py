"""Single-object downloads from S3."""

import os
import shutil
import tempfile
from pathlib import Path

from botocore.exceptions import BotoCoreError, ClientError

from s3mini.core import get_logger
from s3mini.core.exceptions import CommandExecutionError, ValidationError
from s3mini.objectstorage.address import parse_s3_uri, validate_s3_uri

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


class S3Downloader:
    """Reads and downloads individual S3 objects."""

    def __init__(self, client):
        self.client = client

    def get_reader(self, bucket: str, key: str):
        """Return a streaming body for the object at ``bucket``/``key``."""
        response = self.client.get_object(Bucket=bucket, Key=key)
        return response["Body"]

    def get_size(self, bucket: str, key: str) -> int:
        response = self.client.head_object(Bucket=bucket, Key=key)
        return response["ContentLength"]

    def download(self, s3_uri: str, destination: str) -> Path:
        """Download an object into a local directory.

        The object is streamed into a temporary file inside ``destination``
        and renamed to the key's base name once complete, so a failed
        download never leaves a partial file under the final name.

        Args:
            s3_uri: S3 address of the object, s3://bucket/key
            destination: Existing local directory to download into

        Returns:
            Path of the downloaded file

        Raises:
            ValidationError: If the address has no key or destination is not
                a directory
            CommandExecutionError: If the download fails
        """
        bucket, key = parse_s3_uri(validate_s3_uri(s3_uri))
        filename = key.rsplit("/", 1)[-1]
        if not bucket or not filename:
            raise ValidationError(f"S3 uri does not name an object: {s3_uri}")

        target_dir = Path(destination)
        if not target_dir.is_dir():
            raise ValidationError(f"Destination is not a directory: {destination}")

        logger.info("Downloading S3 object", s3_uri=s3_uri, destination=destination)

        fd, temp_name = tempfile.mkstemp(prefix="s3mini-", dir=target_dir)
        try:
            with os.fdopen(fd, "wb") as temp_file:
                size = self.get_size(bucket, key)
                body = self.get_reader(bucket, key)
                try:
                    shutil.copyfileobj(body, temp_file, CHUNK_SIZE)
                finally:
                    body.close()
            target = target_dir / filename
            os.replace(temp_name, target)
        except (BotoCoreError, ClientError, OSError) as e:
            logger.error("Download failed, deleting tempfile", tempfile=temp_name)
            if os.path.exists(temp_name):
                os.remove(temp_name)
            raise CommandExecutionError(f"Failed to download '{s3_uri}': {e}")

        logger.info("S3 object downloaded", s3_uri=s3_uri, path=str(target), size=size)
        return target
