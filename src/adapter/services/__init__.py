from .unit_of_work import SqlAlchemyUnitOfWork
from .pdf_service import ReportLabPdfService, BillerProfile
from .artifact_store import CloudinaryArtifactStore

__all__ = [
    "SqlAlchemyUnitOfWork",
    "ReportLabPdfService",
    "BillerProfile",
    "CloudinaryArtifactStore",
]
