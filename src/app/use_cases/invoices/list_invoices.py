"""ListInvoices Use Case

Lists invoices page by page with optional client/month filters.
"""

from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.artifact_store import ArtifactStore
from .dtos import ListInvoicesQueryDTO, InvoicePageDTO
from .presenter import present_invoice


class ListInvoices:
    """
    Use Case: List invoices

    Business Rules:
    1. Ordered by invoice_number, newest first
    2. search matches client_name case-insensitively, month matches exactly
    3. total counts all matching invoices, not just the returned page
    """

    def __init__(self, invoice_repo: InvoiceRepository, artifact_store: ArtifactStore):
        self.invoice_repo = invoice_repo
        self.artifact_store = artifact_store

    async def execute(self, query: ListInvoicesQueryDTO) -> Result[InvoicePageDTO]:
        """
        Execute invoice listing

        Args:
            query: ListInvoicesQueryDTO with page, limit and filters

        Returns:
            Result[InvoicePageDTO]: Page of invoices or error
        """
        try:
            invoices, total = await self.invoice_repo.find_page(
                page=query.page,
                limit=query.limit,
                search=query.search or None,
                month=query.month or None,
            )

            return Return.ok(
                InvoicePageDTO(
                    data=[present_invoice(invoice, self.artifact_store) for invoice in invoices],
                    total=total,
                    page=query.page,
                    limit=query.limit,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_INVOICES_FAILED",
                    message="Failed to list invoices",
                    reason=str(e),
                )
            )
