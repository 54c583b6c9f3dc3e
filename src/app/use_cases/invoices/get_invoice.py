"""GetInvoice Use Case

Retrieves a single invoice with its artifact URLs.
"""

from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.artifact_store import ArtifactStore
from .dtos import InvoiceResponseDTO
from .presenter import present_invoice


class GetInvoice:
    """Use Case: Get invoice by ID"""

    def __init__(self, invoice_repo: InvoiceRepository, artifact_store: ArtifactStore):
        self.invoice_repo = invoice_repo
        self.artifact_store = artifact_store

    async def execute(self, invoice_id: str) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id)

            if not invoice:
                return Return.err(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message=f"Invoice with ID {invoice_id} not found",
                        reason="Invoice does not exist",
                    )
                )

            return Return.ok(present_invoice(invoice, self.artifact_store))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_INVOICE_FAILED",
                    message="Failed to retrieve invoice",
                    reason=str(e),
                )
            )
