"""Unit tests for CreateInvoice use case

Tests cover:
- Successful invoice creation with artifact URLs
- Invalid billing month
- Numbering retry on duplicate number and giving up
- Render and upload failures leaving a provisional invoice
- Attach failure removing the uploaded artifact
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.use_cases.invoices.create_invoice import CreateInvoice
from src.app.use_cases.invoices.dtos import CreateInvoiceCommandDTO
from src.domain.errors import DuplicateInvoiceNumber, UploadFailed


@pytest.fixture
def create_invoice_use_case(mock_uow, mock_invoice_repo, mock_pdf_service, mock_artifact_store):
    """CreateInvoice use case instance with mocked dependencies"""
    return CreateInvoice(
        uow=mock_uow,
        invoice_repo=mock_invoice_repo,
        pdf_service=mock_pdf_service,
        artifact_store=mock_artifact_store,
        client_name="Acme Trading LLC",
    )


@pytest.fixture
def sample_command():
    """Sample CreateInvoiceCommandDTO"""
    return CreateInvoiceCommandDTO(amount=Decimal("500.00"), month="2024-03")


def _echo_insert():
    return AsyncMock(side_effect=lambda invoice: invoice)


def _attach(mock_invoice_repo):
    async def attach(invoice_id, artifact_id):
        invoice = mock_invoice_repo.insert_provisional.call_args.args[0]
        invoice.artifact_id = artifact_id
        return invoice

    return AsyncMock(side_effect=attach)


@pytest.mark.asyncio
class TestCreateInvoiceSuccess:
    """Test successful invoice creation"""

    async def test_create_invoice_success(
        self, create_invoice_use_case, mock_invoice_repo, mock_uow, mock_pdf_service,
        mock_artifact_store, sample_command
    ):
        """
        Given: An empty ledger
        When: An invoice for 2024-03 is created
        Then: Invoice #1 is issued with derived dates and artifact URLs
        """
        # Arrange
        mock_invoice_repo.next_invoice_number = AsyncMock(return_value=1)
        mock_invoice_repo.insert_provisional = _echo_insert()
        mock_invoice_repo.attach_artifact = _attach(mock_invoice_repo)

        # Act
        result = await create_invoice_use_case.execute(sample_command)

        # Assert
        assert result.is_ok()
        invoice = result.value
        assert invoice.invoice_number == 1
        assert invoice.month == "2024-03"
        assert invoice.issue_date == date(2024, 3, 31)
        assert invoice.due_date == date(2024, 4, 7)
        assert invoice.amount == Decimal("500.00")
        assert invoice.currency == "USD"
        assert invoice.client_name == "Acme Trading LLC"
        assert invoice.artifact_id == "invoices/Invoice_March_1711843200000.pdf"
        assert invoice.preview_url == (
            "https://files.test/preview/invoices/Invoice_March_1711843200000.pdf"
        )
        assert invoice.download_url == (
            "https://files.test/download/invoices/Invoice_March_1711843200000.pdf"
        )

        # Row committed before rendering, then again after attaching
        assert mock_uow.commit.await_count == 2
        mock_uow.rollback.assert_not_awaited()
        mock_pdf_service.render_invoice.assert_called_once()

        pdf_bytes, name = mock_artifact_store.upload.await_args.args
        assert pdf_bytes == b"%PDF-1.4 test"
        assert name.startswith("Invoice_March_")

    async def test_inserted_invoice_is_provisional(
        self, create_invoice_use_case, mock_invoice_repo, sample_command
    ):
        mock_invoice_repo.next_invoice_number = AsyncMock(return_value=7)
        mock_invoice_repo.insert_provisional = AsyncMock(side_effect=lambda invoice: invoice)
        captured = {}

        async def attach(invoice_id, artifact_id):
            inserted = mock_invoice_repo.insert_provisional.await_args.args[0]
            captured["artifact_id_at_insert"] = inserted.artifact_id
            inserted.artifact_id = artifact_id
            return inserted

        mock_invoice_repo.attach_artifact = AsyncMock(side_effect=attach)

        result = await create_invoice_use_case.execute(sample_command)

        assert result.is_ok()
        assert result.value.invoice_number == 7
        assert captured["artifact_id_at_insert"] is None


@pytest.mark.asyncio
class TestCreateInvoiceValidation:
    """Test month validation"""

    async def test_invalid_month(self, create_invoice_use_case, mock_invoice_repo, mock_uow):
        """
        Given: A month that is not YYYY-MM
        When: create is called
        Then: INVALID_MONTH_FORMAT is returned and nothing is numbered
        """
        mock_invoice_repo.next_invoice_number = AsyncMock()

        result = await create_invoice_use_case.execute(
            CreateInvoiceCommandDTO(amount=Decimal("10.00"), month="2024-13")
        )

        assert result.is_err()
        assert result.error.code == "INVALID_MONTH_FORMAT"
        mock_invoice_repo.next_invoice_number.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()

    async def test_month_without_representable_due_date(
        self, create_invoice_use_case, mock_invoice_repo, mock_uow
    ):
        mock_invoice_repo.next_invoice_number = AsyncMock()

        result = await create_invoice_use_case.execute(
            CreateInvoiceCommandDTO(amount=Decimal("10.00"), month="9999-12")
        )

        assert result.is_err()
        assert result.error.code == "INVALID_MONTH_FORMAT"
        mock_invoice_repo.next_invoice_number.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
class TestCreateInvoiceNumbering:
    """Test duplicate-number retries"""

    async def test_retries_after_duplicate_number(
        self, create_invoice_use_case, mock_invoice_repo, mock_uow, sample_command
    ):
        """
        Given: A concurrent create takes number 3 first
        When: Insert of number 3 hits the unique constraint
        Then: The transaction is rolled back and number 4 is used
        """
        # Arrange
        inserted = []

        async def insert(invoice):
            if invoice.invoice_number == 3:
                raise DuplicateInvoiceNumber(3)
            inserted.append(invoice)
            return invoice

        async def attach(invoice_id, artifact_id):
            inserted[-1].artifact_id = artifact_id
            return inserted[-1]

        mock_invoice_repo.next_invoice_number = AsyncMock(side_effect=[3, 4])
        mock_invoice_repo.insert_provisional = AsyncMock(side_effect=insert)
        mock_invoice_repo.attach_artifact = AsyncMock(side_effect=attach)

        # Act
        result = await create_invoice_use_case.execute(sample_command)

        # Assert
        assert result.is_ok()
        assert result.value.invoice_number == 4
        assert mock_uow.rollback.await_count == 1
        assert mock_invoice_repo.next_invoice_number.await_count == 2

    async def test_numbering_conflict_after_max_attempts(
        self, mock_uow, mock_invoice_repo, mock_pdf_service, mock_artifact_store, sample_command
    ):
        """
        Given: Every attempt loses the race
        When: max_attempts is exhausted
        Then: NUMBERING_CONFLICT is returned and nothing is rendered
        """
        use_case = CreateInvoice(
            uow=mock_uow,
            invoice_repo=mock_invoice_repo,
            pdf_service=mock_pdf_service,
            artifact_store=mock_artifact_store,
            client_name="Acme Trading LLC",
            max_attempts=2,
        )
        mock_invoice_repo.next_invoice_number = AsyncMock(side_effect=[1, 2])
        mock_invoice_repo.insert_provisional = AsyncMock(
            side_effect=[DuplicateInvoiceNumber(1), DuplicateInvoiceNumber(2)]
        )

        result = await use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "NUMBERING_CONFLICT"
        assert mock_uow.rollback.await_count == 2
        mock_pdf_service.render_invoice.assert_not_called()
        mock_artifact_store.upload.assert_not_awaited()

    async def test_unexpected_insert_error(
        self, create_invoice_use_case, mock_invoice_repo, mock_uow, sample_command
    ):
        mock_invoice_repo.next_invoice_number = AsyncMock(return_value=1)
        mock_invoice_repo.insert_provisional = AsyncMock(side_effect=Exception("db down"))

        result = await create_invoice_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "CREATE_INVOICE_FAILED"
        assert "db down" in result.error.reason
        mock_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
class TestCreateInvoiceArtifactFailures:
    """Test render, upload and attach failures"""

    async def test_render_failure_keeps_provisional_invoice(
        self, create_invoice_use_case, mock_invoice_repo, mock_uow, mock_pdf_service,
        mock_artifact_store, sample_command
    ):
        """
        Given: The renderer raises
        When: create is called
        Then: RENDER_FAILED is returned, the recorded row is not rolled back
        """
        mock_invoice_repo.next_invoice_number = AsyncMock(return_value=1)
        mock_invoice_repo.insert_provisional = _echo_insert()
        mock_invoice_repo.attach_artifact = AsyncMock()
        mock_pdf_service.render_invoice.side_effect = ValueError("font missing")

        result = await create_invoice_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "RENDER_FAILED"
        assert "Invoice #1" in result.error.reason
        mock_uow.commit.assert_awaited_once()
        mock_uow.rollback.assert_not_awaited()
        mock_artifact_store.upload.assert_not_awaited()
        mock_invoice_repo.attach_artifact.assert_not_awaited()

    async def test_upload_failure_keeps_provisional_invoice(
        self, create_invoice_use_case, mock_invoice_repo, mock_uow, mock_artifact_store,
        sample_command
    ):
        mock_invoice_repo.next_invoice_number = AsyncMock(return_value=2)
        mock_invoice_repo.insert_provisional = _echo_insert()
        mock_invoice_repo.attach_artifact = AsyncMock()
        mock_artifact_store.upload = AsyncMock(
            side_effect=UploadFailed("Invoice_March_1", "timeout")
        )

        result = await create_invoice_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "UPLOAD_FAILED"
        assert "timeout" in result.error.message
        mock_uow.commit.assert_awaited_once()
        mock_uow.rollback.assert_not_awaited()
        mock_invoice_repo.attach_artifact.assert_not_awaited()

    async def test_attach_failure_removes_uploaded_artifact(
        self, create_invoice_use_case, mock_invoice_repo, mock_uow, mock_artifact_store,
        sample_command
    ):
        """
        Given: Upload succeeds but attaching the artifact fails
        When: create is called
        Then: The uploaded artifact is deleted and FINALIZE_INVOICE_FAILED is returned
        """
        mock_invoice_repo.next_invoice_number = AsyncMock(return_value=1)
        mock_invoice_repo.insert_provisional = _echo_insert()
        mock_invoice_repo.attach_artifact = AsyncMock(side_effect=Exception("connection lost"))

        result = await create_invoice_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "FINALIZE_INVOICE_FAILED"
        mock_artifact_store.delete.assert_awaited_once_with(
            "invoices/Invoice_March_1711843200000.pdf"
        )
        mock_uow.rollback.assert_awaited_once()

