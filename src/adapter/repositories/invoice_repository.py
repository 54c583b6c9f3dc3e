"""SQLAlchemy Invoice Repository Implementation

Implements the invoice ledger using SQLAlchemy async session.
"""

from typing import Optional, List, Tuple
from datetime import datetime
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.errors import (
    ArtifactAlreadyAttached,
    DuplicateInvoiceNumber,
    InvoiceNotFound,
)
from src.domain.base import utc_now
from src.domain.invoice import Invoice, INVOICE_NUMBER_CONSTRAINT
from src.domain.invoice_number_counter import InvoiceNumberCounter, INVOICE_COUNTER_NAME


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    The unique constraint on invoices.invoice_number arbitrates concurrent
    creates; the invoice_number_counters row keeps deleted numbers retired.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def next_invoice_number(self) -> int:
        """
        Compute the next invoice number from persisted state

        Returns:
            max(highest invoice_number, counter) + 1
        """
        result = await self.session.execute(select(func.max(Invoice.invoice_number)))
        max_number = result.scalar_one_or_none() or 0

        last_issued = await self._last_issued_number() or 0

        return max(max_number, last_issued) + 1

    async def insert_provisional(self, invoice: Invoice) -> Invoice:
        """
        Persist a new invoice without an artifact

        Args:
            invoice: Invoice entity with number and dates set

        Returns:
            Persisted Invoice

        Raises:
            DuplicateInvoiceNumber: number already taken (concurrent create)
            IntegrityError: any other constraint violation
        """
        invoice.artifact_id = None
        self.session.add(invoice)
        try:
            await self.session.flush()
            await self._advance_counter(invoice.invoice_number)
        except IntegrityError as e:
            if not _violates_invoice_number(e):
                raise
            raise DuplicateInvoiceNumber(invoice.invoice_number) from e

        await self.session.refresh(invoice)
        return invoice

    async def attach_artifact(self, invoice_id: str, artifact_id: str) -> Invoice:
        """
        Set artifact_id on a provisional invoice

        The check and the write are one conditional UPDATE, so of two
        concurrent finalizers only one can attach.

        Raises:
            InvoiceNotFound: no invoice with this ID
            ArtifactAlreadyAttached: invoice already has an artifact
        """
        result = await self.session.execute(
            update(Invoice)
            .where(Invoice.id == invoice_id)
            .where(Invoice.artifact_id.is_(None))
            .values(artifact_id=artifact_id, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )

        invoice = await self._reload(invoice_id)
        if invoice is None:
            raise InvoiceNotFound(invoice_id)
        if result.rowcount == 0:
            raise ArtifactAlreadyAttached(invoice_id, invoice.artifact_id)
        return invoice

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        statement = select(Invoice).where(Invoice.id == invoice_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

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
        conditions = []
        if search:
            conditions.append(Invoice.client_name.icontains(search, autoescape=True))
        if month:
            conditions.append(Invoice.month == month)

        count_statement = select(func.count()).select_from(Invoice)
        statement = select(Invoice)
        for condition in conditions:
            count_statement = count_statement.where(condition)
            statement = statement.where(condition)

        total = (await self.session.execute(count_statement)).scalar_one()

        statement = statement.order_by(Invoice.invoice_number.desc())
        statement = statement.limit(limit).offset((page - 1) * limit)

        result = await self.session.execute(statement)
        return list(result.scalars().all()), total

    async def delete(self, invoice_id: str) -> None:
        invoice = await self.get_by_id(invoice_id)
        if invoice is None:
            raise InvoiceNotFound(invoice_id)

        await self.session.delete(invoice)
        await self.session.flush()

    async def list_provisional(
        self, created_before: datetime, limit: int = 50
    ) -> List[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.artifact_id.is_(None))
            .where(Invoice.created_at < created_before)
            .order_by(Invoice.invoice_number.asc())
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def _reload(self, invoice_id: str) -> Optional[Invoice]:
        # Overwrite any copy already in the identity map
        statement = (
            select(Invoice)
            .where(Invoice.id == invoice_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def _last_issued_number(self) -> Optional[int]:
        statement = select(InvoiceNumberCounter.last_number).where(
            InvoiceNumberCounter.name == INVOICE_COUNTER_NAME
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def _advance_counter(self, invoice_number: int) -> None:
        # Conditional update so the counter never moves backwards
        result = await self.session.execute(
            update(InvoiceNumberCounter)
            .where(InvoiceNumberCounter.name == INVOICE_COUNTER_NAME)
            .where(InvoiceNumberCounter.last_number < invoice_number)
            .values(last_number=invoice_number)
        )
        if result.rowcount:
            return

        if await self._last_issued_number() is None:
            self.session.add(
                InvoiceNumberCounter(name=INVOICE_COUNTER_NAME, last_number=invoice_number)
            )
            await self.session.flush()


def _violates_invoice_number(error: IntegrityError) -> bool:
    # PostgreSQL reports the constraint name, SQLite the column
    detail = str(error.orig)
    return INVOICE_NUMBER_CONSTRAINT in detail or "invoices.invoice_number" in detail
