"""Invoice Domain Entity

One row per monthly invoice issued to the configured client.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index, UniqueConstraint
from sqlalchemy import Integer, Numeric, String, Date, DateTime
from src.domain.base import BaseModel, generate_uuid, utc_now

INVOICE_NUMBER_CONSTRAINT = "uq_invoices_invoice_number"


class Invoice(BaseModel, table=True):
    """
    Invoice - Sequential monthly invoice

    Domain Rules:
    - invoice_number is unique and strictly increasing, never reassigned
    - issue_date is the last day of month, due_date is issue_date + 7 days
    - artifact_id is None until the rendered PDF is uploaded (provisional
      invoice), then it never changes
    - amount and dates are fixed at creation
    """

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint('invoice_number', name=INVOICE_NUMBER_CONSTRAINT),
        Index('ix_invoices_month', 'month'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique invoice identifier (uuid4)"
    )

    invoice_number: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Sequential invoice number (1, 2, 3, ...)"
    )

    month: str = Field(
        sa_column=Column(String(32), nullable=False),
        description="Billing month as supplied by the caller (e.g., 2024-03)"
    )

    issue_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Last calendar day of the billing month"
    )

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Payment due date (issue_date + 7 days)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Invoice amount (precision: 10,2)"
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False, server_default="USD"),
        description="Currency code (ISO 4217)"
    )

    client_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Billed client"
    )

    artifact_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Object storage identifier of the rendered PDF"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Invoice creation timestamp (UTC)"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp (UTC)"
    )

    @property
    def is_provisional(self) -> bool:
        return self.artifact_id is None
