"""Cloudinary Artifact Store Implementation

Stores rendered invoice PDFs as raw Cloudinary assets.
"""

import asyncio
import io
import logging
import re
from typing import Optional
from urllib.parse import unquote, urlparse

import cloudinary
import cloudinary.uploader
import cloudinary.utils

from src.app.services.artifact_store import ArtifactStore, ArtifactUrlVariant
from src.domain.errors import DeleteFailed, UploadFailed

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "raw"
DELIVERY_TYPE = "upload"
ARTIFACT_EXTENSION = ".pdf"

_VERSION_SEGMENT = re.compile(r"^v\d+$")
_SIGNATURE_SEGMENT = re.compile(r"^s--[0-9A-Za-z_-]{8,32}--$")
_TRANSFORMATION_SEGMENT = re.compile(r"^[a-z]{1,3}_[^,/]+(,[a-z]{1,3}_[^,/]+)*$")


class CloudinaryArtifactStore(ArtifactStore):
    """
    Cloudinary implementation of ArtifactStore

    Credentials are passed with every SDK call instead of being set on the
    global cloudinary.config(). Blocking SDK calls run in a worker thread.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        folder: str = "invoices",
        sign_urls: bool = False,
    ):
        """
        Initialize Cloudinary artifact store

        Args:
            cloud_name: Cloudinary cloud name (part of every URL)
            api_key: API key, required for upload/delete
            api_secret: API secret, required for upload/delete and signed URLs
            folder: Folder prefix for uploaded artifacts
            sign_urls: Whether delivery URLs carry a signature segment
        """
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.sign_urls = sign_urls

    def _credentials(self) -> dict:
        credentials = {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
        }
        return {k: v for k, v in credentials.items() if v}

    async def upload(self, data: bytes, name: str) -> str:
        """
        Upload PDF bytes as a raw asset

        Args:
            data: PDF document bytes
            name: Artifact name without extension

        Returns:
            Cloudinary public_id (e.g., invoices/Invoice_March_1711843200000.pdf)

        Raises:
            UploadFailed: Cloudinary rejected the upload or was unreachable
        """
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                io.BytesIO(data),
                resource_type=RESOURCE_TYPE,
                type=DELIVERY_TYPE,
                folder=self.folder,
                public_id=f"{name}{ARTIFACT_EXTENSION}",
                access_mode="public",
                overwrite=False,
                **self._credentials(),
            )
        except Exception as e:
            logger.error(f"Cloudinary error uploading {name}: {e}")
            raise UploadFailed(name, str(e)) from e

        public_id = result.get("public_id") if result else None
        if not public_id:
            logger.error(f"Cloudinary returned no public_id for {name}")
            raise UploadFailed(name, "no response from Cloudinary")

        logger.info(f"Uploaded {public_id} to Cloudinary ({len(data)} bytes)")
        return public_id

    async def delete(self, artifact_id: str) -> None:
        """
        Destroy a raw asset

        Raises:
            DeleteFailed: Cloudinary error or a result other than "ok"
        """
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.destroy,
                artifact_id,
                resource_type=RESOURCE_TYPE,
                type=DELIVERY_TYPE,
                invalidate=True,
                **self._credentials(),
            )
        except Exception as e:
            logger.error(f"Cloudinary error deleting {artifact_id}: {e}")
            raise DeleteFailed(artifact_id, str(e)) from e

        outcome = (result or {}).get("result")
        if outcome != "ok":
            raise DeleteFailed(artifact_id, f"Cloudinary returned result={outcome!r}")

        logger.info(f"Deleted {artifact_id} from Cloudinary")

    def url_for(self, artifact_id: str, variant: ArtifactUrlVariant) -> str:
        """
        Build a delivery URL for an artifact

        Preview URLs are served inline; download URLs add the attachment
        flag so browsers save the file.
        """
        options = {
            "resource_type": RESOURCE_TYPE,
            "type": DELIVERY_TYPE,
            "secure": True,
            "cloud_name": self.cloud_name,
        }
        if variant == ArtifactUrlVariant.DOWNLOAD:
            options["flags"] = "attachment"
        if self.sign_urls:
            options["sign_url"] = True
            options["api_secret"] = self.api_secret

        url, _ = cloudinary.utils.cloudinary_url(artifact_id, **options)
        return url

    def extract_id(self, url: str) -> Optional[str]:
        """
        Recover the public_id from a delivery URL

        Everything after /upload/ is the public_id, once transformation,
        signature and version segments are skipped.

        Returns:
            public_id, or None when the URL does not look like a delivery URL
        """
        try:
            path = urlparse(url).path
        except (TypeError, ValueError, AttributeError):
            return None

        parts = [part for part in path.split("/") if part]
        if DELIVERY_TYPE not in parts:
            return None
        rest = parts[parts.index(DELIVERY_TYPE) + 1:]

        # With a version segment the public_id is whatever follows it
        version_index = next(
            (i for i, part in enumerate(rest) if _VERSION_SEGMENT.match(part)), None
        )
        if version_index is not None:
            rest = rest[version_index + 1:]
        else:
            while rest and (
                _SIGNATURE_SEGMENT.match(rest[0]) or _TRANSFORMATION_SEGMENT.match(rest[0])
            ):
                rest = rest[1:]

        if not rest:
            return None
        return unquote("/".join(rest))
