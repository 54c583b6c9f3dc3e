"""CreateInvoice Use Case

Issues the next sequential invoice for a billing month and attaches its
rendered PDF.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.pdf_service import PdfService
from src.app.services.artifact_store import ArtifactStore
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.billing_month import BillingDates, derive_billing_dates
from src.domain.errors import (
    DuplicateInvoiceNumber,
    InvalidMonthFormat,
    NumberingConflict,
    RenderFailed,
    UploadFailed,
)
from src.domain.invoice import Invoice
from .artifact_publisher import InvoiceArtifactPublisher
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO
from .presenter import present_invoice

logger = logging.getLogger(__name__)

DEFAULT_NUMBERING_ATTEMPTS = 3


class CreateInvoice:
    """
    Use Case: Create invoice for a billing month

    Business Rules:
    1. issue_date is the last day of the month, due_date 7 days later
    2. Invoice number is max issued + 1; a number is never reused
    3. The row is committed before rendering, so a numbered invoice is never
       lost or renumbered when rendering or upload fails
    4. Concurrent creates racing for the same number are retried, bounded
       by max_attempts

    Flow:
    1. Derive issue/due dates
    2. Compute next invoice number
    3. Insert provisional row (artifact_id=None) and commit
       (on duplicate number: rollback, go back to 2)
    4. Render PDF
    5. Upload PDF to artifact store
    6. Attach artifact_id and commit
    7. Return response with artifact URLs
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        pdf_service: PdfService,
        artifact_store: ArtifactStore,
        client_name: str,
        currency: str = "USD",
        max_attempts: int = DEFAULT_NUMBERING_ATTEMPTS,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.artifact_store = artifact_store
        self.client_name = client_name
        self.currency = currency
        self.max_attempts = max(1, max_attempts)
        self.publisher = InvoiceArtifactPublisher(invoice_repo, pdf_service, artifact_store)

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with amount and month

        Returns:
            Result[InvoiceResponseDTO]: Success with invoice details or error
        """
        # Step 1: Derive dates
        try:
            dates = derive_billing_dates(command.month)
        except InvalidMonthFormat as e:
            return Return.err(
                Error(
                    code="INVALID_MONTH_FORMAT",
                    message=str(e),
                    reason="Billing month must be a calendar month such as 2024-03",
                )
            )

        # Steps 2-3: Number and record the invoice
        try:
            invoice = await self._record(command, dates)
        except NumberingConflict as e:
            logger.error(f"Invoice numbering gave up: {e}")
            return Return.err(
                Error(
                    code="NUMBERING_CONFLICT",
                    message=str(e),
                    reason="Concurrent invoice creation kept taking the next number",
                )
            )
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )

        # Steps 4-6: Render, upload, attach. The recorded row stays on failure.
        invoice_number = invoice.invoice_number
        recorded = f"Invoice #{invoice_number} ({invoice.id}) is recorded without a PDF"
        try:
            invoice = await self.publisher.publish(invoice)
            await self.uow.commit()
        except RenderFailed as e:
            return Return.err(Error(code="RENDER_FAILED", message=str(e), reason=recorded))
        except UploadFailed as e:
            logger.error(f"Upload failed for invoice #{invoice_number}: {e}")
            return Return.err(Error(code="UPLOAD_FAILED", message=str(e), reason=recorded))
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="FINALIZE_INVOICE_FAILED",
                    message=f"Failed to attach PDF to invoice #{invoice_number}",
                    reason=f"{recorded}: {e}",
                )
            )

        logger.info(
            f"Issued invoice #{invoice.invoice_number} for {invoice.month} "
            f"({invoice.amount} {invoice.currency})"
        )

        # Step 7: Build response
        return Return.ok(present_invoice(invoice, self.artifact_store))

    async def _record(self, command: CreateInvoiceCommandDTO, dates: BillingDates) -> Invoice:
        """
        Insert the provisional invoice under the next free number

        Raises:
            NumberingConflict: every attempt lost the race for its number
        """
        for attempt in range(1, self.max_attempts + 1):
            invoice_number = await self.invoice_repo.next_invoice_number()

            invoice = Invoice(
                invoice_number=invoice_number,
                month=command.month,
                issue_date=dates.issue_date,
                due_date=dates.due_date,
                amount=command.amount,
                currency=self.currency,
                client_name=self.client_name,
                artifact_id=None,
            )

            try:
                created_invoice = await self.invoice_repo.insert_provisional(invoice)
            except DuplicateInvoiceNumber:
                await self.uow.rollback()
                logger.info(
                    f"Invoice number {invoice_number} taken by a concurrent create "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                continue

            await self.uow.commit()
            return created_invoice

        raise NumberingConflict(self.max_attempts)
