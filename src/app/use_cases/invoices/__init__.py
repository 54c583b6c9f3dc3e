"""Invoice lifecycle use cases"""
from .create_invoice import CreateInvoice
from .list_invoices import ListInvoices
from .get_invoice import GetInvoice
from .delete_invoice import DeleteInvoice
from .finalize_invoice import FinalizeInvoice
from .retry_provisional import RetryProvisionalInvoices
from .artifact_publisher import InvoiceArtifactPublisher, build_artifact_name
from .presenter import present_invoice
from .dtos import (
    CreateInvoiceCommandDTO,
    ListInvoicesQueryDTO,
    InvoiceResponseDTO,
    InvoicePageDTO,
    DeleteInvoiceResponseDTO,
    ProvisionalFailureDTO,
    ProvisionalSweepResultDTO,
)

__all__ = [
    "CreateInvoice",
    "ListInvoices",
    "GetInvoice",
    "DeleteInvoice",
    "FinalizeInvoice",
    "RetryProvisionalInvoices",
    "InvoiceArtifactPublisher",
    "build_artifact_name",
    "present_invoice",
    "CreateInvoiceCommandDTO",
    "ListInvoicesQueryDTO",
    "InvoiceResponseDTO",
    "InvoicePageDTO",
    "DeleteInvoiceResponseDTO",
    "ProvisionalFailureDTO",
    "ProvisionalSweepResultDTO",
]
