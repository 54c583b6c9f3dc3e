"""Artifact Store Interface

Defines the contract for storing rendered invoice documents in external
object storage.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class ArtifactUrlVariant(str, Enum):
    """How a stored artifact is served"""
    PREVIEW = "preview"
    DOWNLOAD = "download"


class ArtifactStore(ABC):
    """
    Object storage for invoice artifacts

    Artifacts are addressed by an opaque identifier. URLs are derived from
    the identifier on demand and never stored.
    """

    @abstractmethod
    async def upload(self, data: bytes, name: str) -> str:
        """
        Store a binary artifact

        Args:
            data: Document bytes
            name: Suggested artifact name (without extension)

        Returns:
            Opaque artifact identifier

        Raises:
            UploadFailed: provider rejected the upload or was unreachable
        """
        pass

    @abstractmethod
    async def delete(self, artifact_id: str) -> None:
        """
        Remove a stored artifact

        Raises:
            DeleteFailed: provider did not confirm the deletion
        """
        pass

    @abstractmethod
    def url_for(self, artifact_id: str, variant: ArtifactUrlVariant) -> str:
        """Build the preview or download URL of an artifact (no I/O)"""
        pass

    @abstractmethod
    def extract_id(self, url: str) -> Optional[str]:
        """Recover the artifact identifier from a URL built by url_for"""
        pass
