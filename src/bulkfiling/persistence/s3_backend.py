"""S3 upload storage backend implementing IFileStore."""

from __future__ import annotations

from pathlib import PurePosixPath

import boto3
from botocore.exceptions import ClientError

from bulkfiling.core.exceptions import FileStoreError
from bulkfiling.core.logging import get_logger

logger = get_logger(__name__)

UPLOAD_CONTENT_TYPES = {
    ".csv": "text/csv",
    ".tsv": "text/tab-separated-values",
    ".txt": "text/plain",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def content_type_for(key: str) -> str:
    """Content type of an upload key, by extension."""
    return UPLOAD_CONTENT_TYPES.get(PurePosixPath(key).suffix.lower(), "application/octet-stream")


class S3FileStore:
    """Bulk-upload files kept in one S3 bucket, addressed by object key."""

    def __init__(self, bucket: str, region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._bucket = bucket
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    @property
    def bucket(self) -> str:
        return self._bucket

    def read(self, path: str) -> bytes:
        try:
            obj = self._client.get_object(Bucket=self._bucket, Key=path)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise FileStoreError(f"No such upload: {path!r}") from exc
            raise FileStoreError(f"Could not read upload {path!r} from s3://{self._bucket}: {exc}") from exc
        return obj["Body"].read()

    def write(self, path: str, data: bytes, content_type: str | None = None) -> str:
        content_type = content_type or content_type_for(path)
        try:
            self._client.put_object(Bucket=self._bucket, Key=path, Body=data, ContentType=content_type)
        except ClientError as exc:
            raise FileStoreError(f"Could not store upload {path!r} in s3://{self._bucket}: {exc}") from exc
        logger.info("upload_stored", bucket=self._bucket, key=path, size=len(data), content_type=content_type)
        return path

    def list_files(self, prefix: str) -> list[str]:
        """All keys under ``prefix``, sorted; follows continuation pages."""
        keys: list[str] = []
        paginator = self._client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
                keys.extend(obj["Key"] for obj in page.get("Contents", []))
        except ClientError as exc:
            raise FileStoreError(f"Could not list uploads under {prefix!r}: {exc}") from exc
        return sorted(keys)
