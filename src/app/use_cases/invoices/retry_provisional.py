"""RetryProvisionalInvoices Use Case

Finalizes invoices left provisional by a failed render or upload.
"""

import logging
import time
from datetime import timedelta
from libs.result import Result, Return, Error
from src.domain.base import utc_now
from src.app.repositories.invoice_repository import InvoiceRepository
from .dtos import ProvisionalFailureDTO, ProvisionalSweepResultDTO
from .finalize_invoice import FinalizeInvoice

logger = logging.getLogger(__name__)


class RetryProvisionalInvoices:
    """
    Use Case: Retry artifact generation for provisional invoices

    Business Rules:
    1. Only invoices older than the grace period are retried, so a create
       still rendering is left alone
    2. Each invoice is finalized independently; one failure does not stop
       the sweep
    3. Invoice numbers are never touched

    Flow:
    1. List provisional invoices created before now - grace period
    2. Run FinalizeInvoice for each
    3. Return counts and per-invoice failures
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        finalize_invoice: FinalizeInvoice,
    ):
        self.invoice_repo = invoice_repo
        self.finalize_invoice = finalize_invoice

    async def execute(
        self, grace_seconds: int = 300, limit: int = 50
    ) -> Result[ProvisionalSweepResultDTO]:
        """
        Execute provisional invoice sweep

        Args:
            grace_seconds: Minimum age of an invoice before it is retried
            limit: Maximum number of invoices handled per sweep

        Returns:
            Result[ProvisionalSweepResultDTO]: Sweep summary
        """
        start_time = time.time()
        sweep_time = utc_now()

        try:
            # Step 1: Find provisional invoices
            invoices = await self.invoice_repo.list_provisional(
                created_before=sweep_time - timedelta(seconds=grace_seconds),
                limit=limit,
            )
            logger.info(f"Found {len(invoices)} provisional invoices to finalize")

            # Step 2: Finalize each. Keys are read up front since a rollback
            # inside FinalizeInvoice expires the loaded rows.
            pending = [(invoice.id, invoice.invoice_number) for invoice in invoices]
            finalized = 0
            failures: list[ProvisionalFailureDTO] = []

            for invoice_id, invoice_number in pending:
                result = await self.finalize_invoice.execute(invoice_id)
                if result.is_ok():
                    finalized += 1
                    continue

                failures.append(
                    ProvisionalFailureDTO(
                        invoice_id=invoice_id,
                        invoice_number=invoice_number,
                        code=result.error.code,
                        message=result.error.message,
                    )
                )
                logger.warning(
                    f"Invoice #{invoice_number} still provisional: "
                    f"{result.error.code} {result.error.message}"
                )

            # Step 3: Build response
            execution_time_ms = int((time.time() - start_time) * 1000)

            return Return.ok(
                ProvisionalSweepResultDTO(
                    total_checked=len(pending),
                    finalized=finalized,
                    failures=failures,
                    sweep_time=sweep_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Provisional invoice sweep failed: {e}")
            return Return.err(
                Error(
                    code="PROVISIONAL_SWEEP_FAILED",
                    message="Failed to retry provisional invoices",
                    reason=str(e),
                )
            )
