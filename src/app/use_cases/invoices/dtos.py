"""Data Transfer Objects for Invoice Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case.
    """

    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Invoice amount (must be >= 0)"
    )

    month: str = Field(
        ...,
        min_length=1,
        description="Billing month (e.g., 2024-03)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "500.00",
                "month": "2024-03"
            }
        }


class ListInvoicesQueryDTO(BaseModel):
    """Query DTO for listing invoices"""

    page: int = Field(default=1, ge=1, description="1-indexed page number")
    limit: int = Field(default=5, ge=1, description="Page size")
    search: Optional[str] = Field(
        default=None,
        description="Case-insensitive substring of the client name"
    )
    month: Optional[str] = Field(
        default=None,
        description="Exact billing month"
    )


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for a single invoice

    preview_url and download_url are derived from artifact_id on every read
    and are None while the invoice is provisional.
    """

    id: str = Field(..., description="Invoice ID")
    invoice_number: int = Field(..., description="Sequential invoice number")
    month: str = Field(..., description="Billing month")
    issue_date: date = Field(..., description="Issue date (last day of month)")
    due_date: date = Field(..., description="Due date (issue date + 7 days)")
    amount: Decimal = Field(..., description="Invoice amount")
    currency: str = Field(..., description="Currency code")
    client_name: str = Field(..., description="Billed client")
    artifact_id: Optional[str] = Field(
        default=None,
        description="Object storage identifier of the PDF"
    )
    preview_url: Optional[str] = Field(
        default=None,
        description="Inline PDF URL"
    )
    download_url: Optional[str] = Field(
        default=None,
        description="Attachment PDF URL"
    )
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "id": "5f0c6d1e-8a57-4c0a-9c4e-2b1f3f0b9a11",
                "invoice_number": 1,
                "month": "2024-03",
                "issue_date": "2024-03-31",
                "due_date": "2024-04-07",
                "amount": "500.00",
                "currency": "USD",
                "client_name": "Acme Trading LLC",
                "artifact_id": "invoices/Invoice_March_1711843200000.pdf",
                "preview_url": "https://res.cloudinary.com/demo/raw/upload/v1/invoices/Invoice_March_1711843200000.pdf",
                "download_url": "https://res.cloudinary.com/demo/raw/upload/fl_attachment/v1/invoices/Invoice_March_1711843200000.pdf",
                "created_at": "2024-03-31T09:00:00Z",
                "updated_at": "2024-03-31T09:00:02Z"
            }
        }


class InvoicePageDTO(BaseModel):
    """Response DTO for a page of invoices"""

    data: List[InvoiceResponseDTO] = Field(..., description="Invoices on this page")
    total: int = Field(..., description="Number of invoices matching the filters")
    page: int = Field(..., description="Page number")
    limit: int = Field(..., description="Page size")


class DeleteInvoiceResponseDTO(BaseModel):
    """Response DTO for invoice deletion"""

    message: str = Field(..., description="Confirmation message")
    invoice_number: int = Field(
        ...,
        description="Retired invoice number (never reassigned)"
    )


class ProvisionalFailureDTO(BaseModel):
    """One provisional invoice that could not be finalized"""

    invoice_id: str
    invoice_number: int
    code: str
    message: str


class ProvisionalSweepResultDTO(BaseModel):
    """Result of a provisional invoice retry sweep"""

    total_checked: int = Field(..., description="Provisional invoices found")
    finalized: int = Field(..., description="Invoices that received an artifact")
    failures: List[ProvisionalFailureDTO] = Field(default_factory=list)
    sweep_time: datetime = Field(..., description="When the sweep ran")
    execution_time_ms: int = Field(..., description="Sweep duration in ms")
