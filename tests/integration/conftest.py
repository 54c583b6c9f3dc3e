from typing import Dict, Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers the tables on SQLModel.metadata
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.services.pdf_service import BillerProfile, ReportLabPdfService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.artifact_store import ArtifactStore, ArtifactUrlVariant
from src.depends import get_artifact_store, get_pdf_service, get_session
from src.domain.errors import DeleteFailed


class InMemoryArtifactStore(ArtifactStore):
    """Artifact store keeping uploaded documents in a dict"""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.deleted = []

    async def upload(self, data: bytes, name: str) -> str:
        artifact_id = f"invoices/{name}.pdf"
        self.objects[artifact_id] = data
        return artifact_id

    async def delete(self, artifact_id: str) -> None:
        self.deleted.append(artifact_id)
        if self.objects.pop(artifact_id, None) is None:
            raise DeleteFailed(artifact_id, "not found")

    def url_for(self, artifact_id: str, variant: ArtifactUrlVariant) -> str:
        return f"https://files.test/{variant.value}/{artifact_id}"

    def extract_id(self, url: str) -> Optional[str]:
        for variant in ArtifactUrlVariant:
            prefix = f"https://files.test/{variant.value}/"
            if url.startswith(prefix):
                return url[len(prefix):]
        return None


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Create an in-memory SQLite engine shared by every session of a test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    """Session factory configured like the application's"""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def invoice_repo(db_session):
    return SqlAlchemyInvoiceRepository(db_session)


@pytest_asyncio.fixture
async def uow(db_session):
    return SqlAlchemyUnitOfWork(db_session)


@pytest_asyncio.fixture
async def artifact_store():
    return InMemoryArtifactStore()


@pytest_asyncio.fixture
async def pdf_service():
    return ReportLabPdfService(
        BillerProfile(
            biller_name="Independent Contractor",
            biller_address="1 Example Road, Example City",
            payee_name="Independent Contractor",
            client_address=["100 Market Street"],
            bank_details=[("Bank", "Example Bank")],
        )
    )


@pytest_asyncio.fixture
async def app(db_session, artifact_store, pdf_service):
    """Create the FastAPI app with database and storage overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_artifact_store] = lambda: artifact_store
    app.dependency_overrides[get_pdf_service] = lambda: pdf_service
    return app


@pytest_asyncio.fixture
async def client(app):
    """Create test client"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
