"""Background workers for the invoice service"""
from .provisional_retry import ProvisionalInvoiceWorker

__all__ = ["ProvisionalInvoiceWorker"]
