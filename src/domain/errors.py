"""Invoice Domain Errors

Exceptions raised by the ledger, the artifact store and the renderer.
Use cases translate them into Result errors.
"""

from typing import Optional


class InvoiceServiceError(Exception):
    """Base class for invoice service failures"""
    pass


class InvalidMonthFormat(InvoiceServiceError):
    def __init__(self, month: str):
        self.month = month
        super().__init__(f"Invalid billing month {month!r}, expected YYYY-MM")


class DuplicateInvoiceNumber(InvoiceServiceError):
    """Unique constraint on invoice_number rejected an insert"""

    def __init__(self, invoice_number: int):
        self.invoice_number = invoice_number
        super().__init__(f"Invoice number {invoice_number} is already taken")


class NumberingConflict(InvoiceServiceError):
    """Concurrent creates kept winning the next invoice number"""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not assign an invoice number after {attempts} attempts"
        )


class InvoiceNotFound(InvoiceServiceError):
    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice with ID {invoice_id} not found")


class ArtifactAlreadyAttached(InvoiceServiceError):
    def __init__(self, invoice_id: str, artifact_id: str):
        self.invoice_id = invoice_id
        self.artifact_id = artifact_id
        super().__init__(
            f"Invoice {invoice_id} already has artifact {artifact_id}"
        )


class RenderFailed(InvoiceServiceError):
    def __init__(self, invoice_id: str, detail: str):
        self.invoice_id = invoice_id
        self.detail = detail
        super().__init__(f"Failed to render invoice {invoice_id}: {detail}")


class UploadFailed(InvoiceServiceError):
    def __init__(self, name: str, detail: str):
        self.name = name
        self.detail = detail
        super().__init__(f"Failed to upload artifact {name}: {detail}")


class DeleteFailed(InvoiceServiceError):
    def __init__(self, artifact_id: str, detail: Optional[str] = None):
        self.artifact_id = artifact_id
        self.detail = detail
        message = f"Failed to delete artifact {artifact_id}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
