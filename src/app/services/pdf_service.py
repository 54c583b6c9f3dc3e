"""PDF Generation Service Interface

Defines the contract for rendering invoice documents.
"""

from abc import ABC, abstractmethod
from src.domain.invoice import Invoice


class PdfService(ABC):
    """
    Service interface for PDF generation

    Renders a persisted invoice into a fixed-layout PDF document.
    """

    @abstractmethod
    def render_invoice(self, invoice: Invoice) -> bytes:
        """
        Render an invoice PDF

        Args:
            invoice: Invoice entity with number, dates and amount set

        Returns:
            PDF document as bytes
        """
        pass
