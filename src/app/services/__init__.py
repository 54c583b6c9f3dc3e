from .unit_of_work import UnitOfWork
from .pdf_service import PdfService
from .artifact_store import ArtifactStore, ArtifactUrlVariant

__all__ = [
    "UnitOfWork",
    "PdfService",
    "ArtifactStore",
    "ArtifactUrlVariant",
]
