import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.artifact_store import ArtifactUrlVariant
from src.domain.invoice import Invoice


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_invoice_repo():
    """Mock invoice repository"""
    return MagicMock()


@pytest.fixture
def mock_pdf_service():
    """Mock PDF renderer returning a tiny PDF"""
    pdf_service = MagicMock()
    pdf_service.render_invoice = MagicMock(return_value=b"%PDF-1.4 test")
    return pdf_service


@pytest.fixture
def mock_artifact_store():
    """Mock artifact store with deterministic URLs"""
    store = MagicMock()
    store.upload = AsyncMock(return_value="invoices/Invoice_March_1711843200000.pdf")
    store.delete = AsyncMock()
    store.url_for = MagicMock(
        side_effect=lambda artifact_id, variant: (
            f"https://files.test/{variant.value}/{artifact_id}"
        )
    )
    return store


@pytest.fixture
def make_invoice():
    """Factory for Invoice entities"""

    def _make(
        invoice_number: int = 1,
        month: str = "2024-03",
        amount: str = "500.00",
        artifact_id=None,
        invoice_id: str = None,
    ) -> Invoice:
        invoice = Invoice(
            invoice_number=invoice_number,
            month=month,
            issue_date=date(2024, 3, 31),
            due_date=date(2024, 4, 7),
            amount=Decimal(amount),
            currency="USD",
            client_name="Acme Trading LLC",
            artifact_id=artifact_id,
            created_at=datetime(2024, 3, 31, 9, 0, 0, tzinfo=timezone.utc),
            updated_at=datetime(2024, 3, 31, 9, 0, 0, tzinfo=timezone.utc),
        )
        if invoice_id:
            invoice.id = invoice_id
        return invoice

    return _make


@pytest.fixture
def preview_url():
    return lambda artifact_id: f"https://files.test/{ArtifactUrlVariant.PREVIEW.value}/{artifact_id}"


@pytest.fixture
def download_url():
    return lambda artifact_id: f"https://files.test/{ArtifactUrlVariant.DOWNLOAD.value}/{artifact_id}"
