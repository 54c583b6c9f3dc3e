"""Invoice API Routes

FastAPI routes for issuing, listing, fetching and deleting invoices.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError
from src.api.schemas.invoice_request import CreateInvoiceRequestSchema
from src.app.services.artifact_store import ArtifactStore
from src.app.services.pdf_service import PdfService
from src.app.use_cases.invoices import (
    CreateInvoice,
    CreateInvoiceCommandDTO,
    DeleteInvoice,
    DeleteInvoiceResponseDTO,
    FinalizeInvoice,
    GetInvoice,
    InvoicePageDTO,
    InvoiceResponseDTO,
    ListInvoices,
    ListInvoicesQueryDTO,
)
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_artifact_store, get_pdf_service, get_session

router = APIRouter(prefix="/invoices", tags=["Invoices"])

ERROR_STATUS = {
    "INVALID_MONTH_FORMAT": status.HTTP_400_BAD_REQUEST,
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NUMBERING_CONFLICT": status.HTTP_409_CONFLICT,
    "INVOICE_ALREADY_FINALIZED": status.HTTP_409_CONFLICT,
    "RENDER_FAILED": status.HTTP_502_BAD_GATEWAY,
    "UPLOAD_FAILED": status.HTTP_502_BAD_GATEWAY,
}


def _raise_client_error(error: Error):
    raise ClientError(
        error, status_code=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST)
    )


def _error_example(description: str, code: str, message: str) -> dict:
    return {
        "description": description,
        "content": {
            "application/json": {
                "example": {"error": {"code": code, "message": message}}
            }
        },
    }


NOT_FOUND_RESPONSE = _error_example(
    "Invoice not found",
    "INVOICE_NOT_FOUND",
    "Invoice with ID 5f0c6d1e-8a57-4c0a-9c4e-2b1f3f0b9a11 not found",
)


@router.post(
    "",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: _error_example(
            "Invalid billing month",
            "INVALID_MONTH_FORMAT",
            "Invalid billing month '2024-13', expected YYYY-MM",
        ),
        409: _error_example(
            "Numbering conflict",
            "NUMBERING_CONFLICT",
            "Could not assign an invoice number after 3 attempts",
        ),
        502: _error_example(
            "PDF could not be rendered or stored",
            "UPLOAD_FAILED",
            "Failed to upload artifact Invoice_March_1711843200000: timeout",
        ),
    },
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
    pdf_service: PdfService = Depends(get_pdf_service),
    artifact_store: ArtifactStore = Depends(get_artifact_store),
):
    """
    Issue the next sequential invoice for a billing month.

    The invoice is dated on the last day of the month and due 7 days later.
    Its PDF is rendered and uploaded to object storage.

    **Request body:**
    - `amount` (required): Non-negative amount with at most 2 decimals
    - `month` (required): Billing month, e.g. `2024-03`

    **Returns:**
    - 201: Invoice created with preview and download URLs
    - 400: Invalid month
    - 409: Invoice number could not be allocated
    - 502: Invoice is recorded but its PDF is missing (retried by the worker)
    """
    use_case = CreateInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        pdf_service=pdf_service,
        artifact_store=artifact_store,
        client_name=ApplicationConfig.INVOICE_CLIENT_NAME,
        currency=ApplicationConfig.INVOICE_CURRENCY,
        max_attempts=ApplicationConfig.INVOICE_NUMBERING_MAX_ATTEMPTS,
    )
    result = await use_case.execute(
        CreateInvoiceCommandDTO(amount=request.amount, month=request.month)
    )

    if result.is_err():
        _raise_client_error(result.error)

    return result.value


@router.get(
    "",
    response_model=InvoicePageDTO,
    status_code=status.HTTP_200_OK,
)
async def list_invoices(
    page: int = Query(1, ge=1, description="1-indexed page number"),
    limit: int = Query(5, ge=1, le=100, description="Page size (max 100)"),
    search: Optional[str] = Query(None, description="Client name contains (case-insensitive)"),
    month: Optional[str] = Query(None, description="Exact billing month"),
    session: AsyncSession = Depends(get_session),
    artifact_store: ArtifactStore = Depends(get_artifact_store),
):
    """
    List invoices, newest number first.

    **Query parameters:**
    - `page` (optional): Page number (default 1)
    - `limit` (optional): Page size (default 5, max 100)
    - `search` (optional): Client name substring
    - `month` (optional): Exact billing month
    """
    use_case = ListInvoices(SqlAlchemyInvoiceRepository(session), artifact_store)
    result = await use_case.execute(
        ListInvoicesQueryDTO(page=page, limit=limit, search=search, month=month)
    )

    if result.is_err():
        _raise_client_error(result.error)

    return result.value


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def get_invoice(
    invoice_id: str,
    session: AsyncSession = Depends(get_session),
    artifact_store: ArtifactStore = Depends(get_artifact_store),
):
    """Fetch a single invoice with its artifact URLs."""
    use_case = GetInvoice(SqlAlchemyInvoiceRepository(session), artifact_store)
    result = await use_case.execute(invoice_id)

    if result.is_err():
        _raise_client_error(result.error)

    return result.value


@router.delete(
    "/{invoice_id}",
    response_model=DeleteInvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def delete_invoice(
    invoice_id: str,
    session: AsyncSession = Depends(get_session),
    artifact_store: ArtifactStore = Depends(get_artifact_store),
):
    """
    Delete an invoice and, best effort, its PDF.

    The invoice number is retired and never issued again.
    """
    use_case = DeleteInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        artifact_store=artifact_store,
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        _raise_client_error(result.error)

    return result.value


@router.post(
    "/{invoice_id}/artifact",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: NOT_FOUND_RESPONSE,
        409: _error_example(
            "Invoice already has a PDF",
            "INVOICE_ALREADY_FINALIZED",
            "Invoice #1 already has a PDF",
        ),
    },
)
async def finalize_invoice(
    invoice_id: str,
    session: AsyncSession = Depends(get_session),
    pdf_service: PdfService = Depends(get_pdf_service),
    artifact_store: ArtifactStore = Depends(get_artifact_store),
):
    """Render and attach the PDF of a provisional invoice."""
    use_case = FinalizeInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        pdf_service=pdf_service,
        artifact_store=artifact_store,
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        _raise_client_error(result.error)

    return result.value
