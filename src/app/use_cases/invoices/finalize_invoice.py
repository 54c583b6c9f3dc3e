"""FinalizeInvoice Use Case

Renders and attaches the PDF of a provisional invoice, i.e. one whose
creation stopped after it was numbered and recorded.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.pdf_service import PdfService
from src.app.services.artifact_store import ArtifactStore
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.errors import (
    ArtifactAlreadyAttached,
    InvoiceNotFound,
    RenderFailed,
    UploadFailed,
)
from .artifact_publisher import InvoiceArtifactPublisher
from .dtos import InvoiceResponseDTO
from .presenter import present_invoice

logger = logging.getLogger(__name__)


class FinalizeInvoice:
    """
    Use Case: Finalize provisional invoice

    Business Rules:
    1. Invoice must exist
    2. Invoice must not have an artifact yet (artifacts are immutable)
    3. Invoice number, dates and amount are left unchanged

    Flow:
    1. Retrieve invoice by ID
    2. Validate invoice is provisional
    3. Render, upload, attach artifact
    4. Commit transaction
    5. Return response with artifact URLs
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        pdf_service: PdfService,
        artifact_store: ArtifactStore,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.artifact_store = artifact_store
        self.publisher = InvoiceArtifactPublisher(invoice_repo, pdf_service, artifact_store)

    async def execute(self, invoice_id: str) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice finalization

        Args:
            invoice_id: ID of a provisional invoice

        Returns:
            Result[InvoiceResponseDTO]: Finalized invoice or error
        """
        try:
            # Step 1: Retrieve invoice
            invoice = await self.invoice_repo.get_by_id(invoice_id)
            if not invoice:
                return Return.err(self._not_found(invoice_id))

            invoice_number = invoice.invoice_number

            # Step 2: Validate invoice is provisional
            if invoice.artifact_id:
                return Return.err(self._already_finalized(invoice_number))

            # Steps 3-4: Publish and commit
            invoice = await self.publisher.publish(invoice)
            await self.uow.commit()

            logger.info(f"Finalized provisional invoice #{invoice.invoice_number}")

            return Return.ok(present_invoice(invoice, self.artifact_store))

        except RenderFailed as e:
            return Return.err(
                Error(code="RENDER_FAILED", message=str(e), reason="Invoice is still provisional")
            )
        except UploadFailed as e:
            return Return.err(
                Error(code="UPLOAD_FAILED", message=str(e), reason="Invoice is still provisional")
            )
        except InvoiceNotFound:
            await self.uow.rollback()
            return Return.err(self._not_found(invoice_id))
        except ArtifactAlreadyAttached:
            # A concurrent finalize or create attached first
            await self.uow.rollback()
            return Return.err(self._already_finalized(invoice_number))
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="FINALIZE_INVOICE_FAILED",
                    message="Failed to finalize invoice",
                    reason=str(e),
                )
            )

    @staticmethod
    def _not_found(invoice_id: str) -> Error:
        return Error(
            code="INVOICE_NOT_FOUND",
            message=f"Invoice with ID {invoice_id} not found",
            reason="Invoice does not exist",
        )

    @staticmethod
    def _already_finalized(invoice_number: int) -> Error:
        return Error(
            code="INVOICE_ALREADY_FINALIZED",
            message=f"Invoice #{invoice_number} already has a PDF",
            reason="Artifacts cannot be replaced",
        )
