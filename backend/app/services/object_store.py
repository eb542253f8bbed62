"""Object storage for note attachments: pre-signed URLs only, never file bytes."""

from __future__ import annotations

from dataclasses import dataclass

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from backend.app.core.errors import ObjectStoreError

DEFAULT_EXPIRY_SECONDS = 300
MISSING_OBJECT_CODES = {"403", "404", "NoSuchKey", "NotFound", "Forbidden"}


class ObjectStore:
    expires_in: int = DEFAULT_EXPIRY_SECONDS

    def presign_upload(self, key: str) -> str:
        raise NotImplementedError

    def presign_download(self, key: str, *, filename: str | None = None) -> str:
        raise NotImplementedError

    def exists(self, key: str) -> bool:
        raise NotImplementedError


@dataclass
class S3ObjectStore(ObjectStore):
    bucket: str
    region: str = ""
    endpoint: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    expires_in: int = DEFAULT_EXPIRY_SECONDS

    def __post_init__(self):
        self._s3 = None

    def _client(self):
        if self._s3 is None:
            self._s3 = boto3.client(
                "s3",
                endpoint_url=self.endpoint,
                region_name=self.region or None,
                aws_access_key_id=self.access_key_id,
                aws_secret_access_key=self.secret_access_key,
                config=Config(signature_version="s3v4"),
            )
        return self._s3

    def _presign(self, method: str, params: dict) -> str:
        try:
            return self._client().generate_presigned_url(
                ClientMethod=method,
                Params=params,
                ExpiresIn=self.expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(f"Could not sign {method} URL for {params['Key']}") from e

    def presign_upload(self, key: str) -> str:
        return self._presign("put_object", {"Bucket": self.bucket, "Key": key})

    def presign_download(self, key: str, *, filename: str | None = None) -> str:
        params: dict[str, object] = {"Bucket": self.bucket, "Key": key}
        if filename:
            params["ResponseContentDisposition"] = f'attachment; filename="{filename}"'
        return self._presign("get_object", params)

    def exists(self, key: str) -> bool:
        """Whether the object is in the bucket.

        Without s3:ListBucket, S3 answers 403 rather than 404 for a missing
        key, so 403 also counts as absent.
        """
        try:
            self._client().head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in MISSING_OBJECT_CODES:
                return False
            raise ObjectStoreError(f"Could not check object {key}") from e
        except BotoCoreError as e:
            raise ObjectStoreError(f"Could not check object {key}") from e


def object_store_from_settings(settings) -> ObjectStore:
    return S3ObjectStore(
        bucket=settings.bucket_name,
        region=settings.aws_region,
        endpoint=settings.s3_endpoint,
        expires_in=settings.presign_expiry_seconds,
    )
