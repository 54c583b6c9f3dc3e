"""Invoice artifact publishing

Render -> upload -> attach, shared by invoice creation and the explicit
finalize/retry path for provisional invoices.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.artifact_store import ArtifactStore
from src.app.services.pdf_service import PdfService
from src.domain.billing_month import month_display_name
from src.domain.errors import DeleteFailed, RenderFailed
from src.domain.invoice import Invoice

logger = logging.getLogger(__name__)


def build_artifact_name(invoice: Invoice, timestamp_ms: Optional[int] = None) -> str:
    """
    Artifact name for an invoice PDF, e.g. Invoice_March_1711843200000

    The timestamp keeps re-renders of the same month from colliding.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    month_name = month_display_name(invoice.month, include_year=False)
    return f"Invoice_{month_name}_{timestamp_ms}"


class InvoiceArtifactPublisher:
    """
    Produces and attaches the PDF artifact of a recorded invoice

    Does not commit. On failure the invoice row is left untouched (still
    provisional) and the error propagates:
    - RenderFailed: the renderer raised
    - UploadFailed: the artifact store rejected the upload
    - anything raised by attach_artifact, after the uploaded artifact has
      been removed again
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        pdf_service: PdfService,
        artifact_store: ArtifactStore,
        clock: Callable[[], float] = time.time,
    ):
        self.invoice_repo = invoice_repo
        self.pdf_service = pdf_service
        self.artifact_store = artifact_store
        self.clock = clock

    async def publish(self, invoice: Invoice) -> Invoice:
        """
        Render, upload and attach the invoice PDF

        Args:
            invoice: Persisted provisional invoice

        Returns:
            Invoice with artifact_id set
        """
        # Rendering is the slow step, keep it off the event loop
        try:
            pdf_bytes = await asyncio.to_thread(self.pdf_service.render_invoice, invoice)
        except Exception as e:
            logger.error(
                f"Rendering failed for invoice #{invoice.invoice_number} ({invoice.id}): {e}"
            )
            raise RenderFailed(invoice.id, str(e)) from e

        name = build_artifact_name(invoice, int(self.clock() * 1000))
        artifact_id = await self.artifact_store.upload(pdf_bytes, name)

        try:
            return await self.invoice_repo.attach_artifact(invoice.id, artifact_id)
        except Exception:
            await self._discard(artifact_id)
            raise

    async def _discard(self, artifact_id: str) -> None:
        try:
            await self.artifact_store.delete(artifact_id)
        except DeleteFailed as e:
            logger.warning(f"Could not remove unattached artifact {artifact_id}: {e}")
