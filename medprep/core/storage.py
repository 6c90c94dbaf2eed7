# medprep/core/storage.py
"""Signed download URLs from S3-compatible object storage."""

import logging
from functools import lru_cache
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from medprep.core import config
from medprep.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


class SignedUrlIssuer:
    """Issues time-limited download URLs for stored files.

    This base issuer has no storage behind it and refuses every request.
    """

    async def create_signed_url(self, file_path: str, expires_in: int = config.SIGNED_URL_EXPIRES_IN) -> str:
        raise UpstreamServiceError("Object storage is not configured")


class S3SignedUrlIssuer(SignedUrlIssuer):
    def __init__(
        self,
        *,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket: str,
        region: Optional[str] = None,
        addressing_style: str = "path",
    ) -> None:
        cfg = Config(signature_version="s3v4", s3={"addressing_style": addressing_style})
        self.client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=cfg,
        )
        self.bucket = bucket

    async def create_signed_url(self, file_path: str, expires_in: int = config.SIGNED_URL_EXPIRES_IN) -> str:
        try:
            url = self.client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": file_path},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to sign URL for {file_path}: {e}")
            raise UpstreamServiceError("Failed to generate download URL") from e

        if not url:
            raise UpstreamServiceError("Failed to generate download URL")
        return url


@lru_cache(maxsize=1)
def get_signed_url_issuer() -> SignedUrlIssuer:
    """Build the issuer from environment configuration."""
    if not (config.STORAGE_ACCESS_KEY_ID and config.STORAGE_SECRET_ACCESS_KEY):
        logger.warning("Storage credentials missing; download URLs cannot be issued")
        return SignedUrlIssuer()

    return S3SignedUrlIssuer(
        endpoint_url=config.STORAGE_ENDPOINT_URL,
        access_key=config.STORAGE_ACCESS_KEY_ID,
        secret_key=config.STORAGE_SECRET_ACCESS_KEY,
        bucket=config.STORAGE_BUCKET,
        region=config.STORAGE_REGION,
        addressing_style=config.STORAGE_ADDRESSING_STYLE,
    )
