"""Invoice presentation

Adds artifact URLs to an invoice at read time.
"""

from src.app.services.artifact_store import ArtifactStore, ArtifactUrlVariant
from src.domain.invoice import Invoice
from .dtos import InvoiceResponseDTO


def present_invoice(invoice: Invoice, artifact_store: ArtifactStore) -> InvoiceResponseDTO:
    """
    Convert an Invoice entity into its response DTO

    URLs are rebuilt from artifact_id on every call, so changing the URL
    scheme needs no data migration. Provisional invoices get no URLs.
    """
    preview_url = None
    download_url = None
    if invoice.artifact_id:
        preview_url = artifact_store.url_for(invoice.artifact_id, ArtifactUrlVariant.PREVIEW)
        download_url = artifact_store.url_for(invoice.artifact_id, ArtifactUrlVariant.DOWNLOAD)

    return InvoiceResponseDTO(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        month=invoice.month,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        amount=invoice.amount,
        currency=invoice.currency,
        client_name=invoice.client_name,
        artifact_id=invoice.artifact_id,
        preview_url=preview_url,
        download_url=download_url,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
    )
