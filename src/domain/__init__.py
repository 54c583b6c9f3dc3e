from .base import BaseModel, generate_uuid
from .invoice import Invoice
from .invoice_number_counter import InvoiceNumberCounter, INVOICE_COUNTER_NAME
from .billing_month import BillingDates, derive_billing_dates, month_display_name
from .errors import (
    InvoiceServiceError,
    InvalidMonthFormat,
    DuplicateInvoiceNumber,
    NumberingConflict,
    InvoiceNotFound,
    ArtifactAlreadyAttached,
    RenderFailed,
    UploadFailed,
    DeleteFailed,
)

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Invoice",
    "InvoiceNumberCounter",
    "INVOICE_COUNTER_NAME",
    "BillingDates",
    "derive_billing_dates",
    "month_display_name",
    "InvoiceServiceError",
    "InvalidMonthFormat",
    "DuplicateInvoiceNumber",
    "NumberingConflict",
    "InvoiceNotFound",
    "ArtifactAlreadyAttached",
    "RenderFailed",
    "UploadFailed",
    "DeleteFailed",
]
