"""DeleteInvoice Use Case

Removes an invoice and its stored PDF. The invoice number is retired.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.artifact_store import ArtifactStore
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.errors import DeleteFailed, InvoiceNotFound
from .dtos import DeleteInvoiceResponseDTO

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete invoice

    Business Rules:
    1. Invoice must exist
    2. The artifact (if any) is deleted first, exactly once
    3. A failed artifact delete is logged and does not block the row delete;
       an orphaned file is acceptable, a row pointing at nothing is not
    4. The invoice number is never reassigned

    Flow:
    1. Retrieve invoice by ID
    2. Delete artifact from store (best effort)
    3. Delete invoice row and commit
    4. Return confirmation with the retired number
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        artifact_store: ArtifactStore,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.artifact_store = artifact_store

    async def execute(self, invoice_id: str) -> Result[DeleteInvoiceResponseDTO]:
        """
        Execute invoice deletion

        Args:
            invoice_id: Invoice ID to delete

        Returns:
            Result[DeleteInvoiceResponseDTO]: Confirmation or error
        """
        not_found = Error(
            code="INVOICE_NOT_FOUND",
            message=f"Invoice with ID {invoice_id} not found",
            reason="Invoice does not exist",
        )

        try:
            # Step 1: Retrieve invoice
            invoice = await self.invoice_repo.get_by_id(invoice_id)
            if not invoice:
                return Return.err(not_found)

            invoice_number = invoice.invoice_number

            # Step 2: Delete artifact, failures are tolerated
            if invoice.artifact_id:
                try:
                    await self.artifact_store.delete(invoice.artifact_id)
                except DeleteFailed as e:
                    logger.warning(
                        f"Invoice #{invoice_number} deleted with orphaned artifact "
                        f"{invoice.artifact_id}: {e}"
                    )

            # Step 3: Delete row
            await self.invoice_repo.delete(invoice_id)
            await self.uow.commit()

            logger.info(f"Deleted invoice #{invoice_number} ({invoice_id})")

            return Return.ok(
                DeleteInvoiceResponseDTO(
                    message=f"Invoice #{invoice_number} deleted",
                    invoice_number=invoice_number,
                )
            )

        except InvoiceNotFound:
            await self.uow.rollback()
            return Return.err(not_found)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_INVOICE_FAILED",
                    message="Failed to delete invoice",
                    reason=str(e),
                )
            )
