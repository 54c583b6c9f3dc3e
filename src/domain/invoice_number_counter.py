"""Invoice Number Counter

High-water mark of issued invoice numbers. Deleting an invoice removes
its row but not its number, so the next number is computed from both the
remaining invoices and this counter.
"""

from sqlmodel import Field, Column
from sqlalchemy import Integer, String
from src.domain.base import BaseModel

INVOICE_COUNTER_NAME = "invoice"


class InvoiceNumberCounter(BaseModel, table=True):
    __tablename__ = "invoice_number_counters"

    name: str = Field(
        sa_column=Column(String(32), primary_key=True),
        description="Sequence name"
    )

    last_number: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Highest invoice number ever issued"
    )
