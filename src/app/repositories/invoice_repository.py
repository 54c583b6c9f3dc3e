"""Invoice Repository Interface

Defines the contract for invoice ledger persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List, Tuple
from src.domain.invoice import Invoice


class InvoiceRepository(ABC):
    """
    Repository interface for the invoice ledger

    Owns invoice numbering and row persistence. Implementations flush but
    never commit; transactions are driven by the UnitOfWork.
    """

    @abstractmethod
    async def next_invoice_number(self) -> int:
        """
        Compute the next invoice number from persisted state

        Returns:
            Highest number ever issued + 1, or 1 for an empty ledger
        """
        pass

    @abstractmethod
    async def insert_provisional(self, invoice: Invoice) -> Invoice:
        """
        Persist a new invoice without an artifact

        Args:
            invoice: Invoice entity with number and dates set

        Returns:
            Persisted Invoice

        Raises:
            DuplicateInvoiceNumber: number already taken (concurrent create)
        """
        pass

    @abstractmethod
    async def attach_artifact(self, invoice_id: str, artifact_id: str) -> Invoice:
        """
        Record the stored artifact of an invoice

        Raises:
            InvoiceNotFound: no invoice with this ID
            ArtifactAlreadyAttached: invoice already has an artifact
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_page(
        self,
        page: int,
        limit: int,
        search: Optional[str] = None,
        month: Optional[str] = None,
    ) -> Tuple[List[Invoice], int]:
        """
        Retrieve one page of invoices, newest number first

        Args:
            page: 1-indexed page number
            limit: Maximum number of invoices to return
            search: Optional case-insensitive substring of client_name
            month: Optional exact billing month

        Returns:
            (invoices on the page, total number of matching invoices)
        """
        pass

    @abstractmethod
    async def delete(self, invoice_id: str) -> None:
        """
        Remove an invoice row

        Raises:
            InvoiceNotFound: no invoice with this ID
        """
        pass

    @abstractmethod
    async def list_provisional(
        self, created_before: datetime, limit: int = 50
    ) -> List[Invoice]:
        """
        Retrieve invoices still waiting for an artifact

        Args:
            created_before: Only invoices created before this time
            limit: Maximum number of invoices to return

        Returns:
            Provisional invoices, oldest first
        """
        pass
