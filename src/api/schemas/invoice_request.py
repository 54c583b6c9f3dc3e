"""Request schemas for Invoice API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from pydantic import BaseModel, Field


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating an invoice

    Used for POST /invoices endpoint. The month format itself is checked by
    the use case so that it is reported as INVALID_MONTH_FORMAT.
    """

    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Invoice amount (must be >= 0, at most 2 decimals)"
    )

    month: str = Field(
        ...,
        min_length=1,
        description="Billing month in YYYY-MM form"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "500.00",
                "month": "2024-03"
            }
        }
