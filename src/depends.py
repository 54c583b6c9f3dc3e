from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.artifact_store import CloudinaryArtifactStore
from src.adapter.services.pdf_service import BillerProfile, ReportLabPdfService
from src.app.services.artifact_store import ArtifactStore
from src.app.services.pdf_service import PdfService

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def build_artifact_store(config=ApplicationConfig) -> ArtifactStore:
    return CloudinaryArtifactStore(
        cloud_name=config.CLOUDINARY_CLOUD_NAME,
        api_key=config.CLOUDINARY_API_KEY or None,
        api_secret=config.CLOUDINARY_API_SECRET or None,
        folder=config.CLOUDINARY_FOLDER,
        sign_urls=config.CLOUDINARY_SIGN_URLS,
    )


def build_pdf_service(config=ApplicationConfig) -> PdfService:
    bank_details = config.BILLER_BANK_DETAILS or {}
    return ReportLabPdfService(
        BillerProfile(
            biller_name=config.BILLER_NAME,
            biller_address=config.BILLER_ADDRESS,
            payee_name=config.BILLER_PAYEE_NAME,
            client_address=list(config.INVOICE_CLIENT_ADDRESS or []),
            bank_details=[(str(k), str(v)) for k, v in bank_details.items()],
        )
    )


def get_artifact_store() -> ArtifactStore:
    return build_artifact_store(ApplicationConfig)


def get_pdf_service() -> PdfService:
    return build_pdf_service(ApplicationConfig)
