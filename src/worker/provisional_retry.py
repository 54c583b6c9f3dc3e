"""Provisional Invoice Retry Background Worker

Periodically finalizes invoices that were numbered and recorded but never
received their PDF because rendering or upload failed.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.artifact_store import ArtifactStore
from src.app.services.pdf_service import PdfService
from src.app.use_cases.invoices import (
    FinalizeInvoice,
    ProvisionalSweepResultDTO,
    RetryProvisionalInvoices,
)
from src.depends import build_artifact_store, build_pdf_service
from src.domain.base import utc_now

logger = logging.getLogger(__name__)


class ProvisionalInvoiceWorker:
    """
    Background worker for provisional invoice recovery

    Features:
    - Finds invoices without an artifact older than the grace period
    - Renders, uploads and attaches their PDF
    - Logs invoices that are still provisional
    - Can run once or continuously

    Usage:
        # Run once
        worker = ProvisionalInvoiceWorker()
        result = await worker.run_once()

        # Run continuously
        worker = ProvisionalInvoiceWorker()
        await worker.run_forever(interval_seconds=900)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        pdf_service: Optional[PdfService] = None,
        artifact_store: Optional[ArtifactStore] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            pdf_service: Renderer (defaults to the configured ReportLab renderer)
            artifact_store: Object storage (defaults to the configured Cloudinary store)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.pdf_service = pdf_service or build_pdf_service(ApplicationConfig)
        self.artifact_store = artifact_store or build_artifact_store(ApplicationConfig)

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("ProvisionalInvoiceWorker initialized")

    async def run_once(self) -> ProvisionalSweepResultDTO:
        """
        Run one sweep over provisional invoices

        Returns:
            ProvisionalSweepResultDTO with sweep results
        """
        if not ApplicationConfig.PROVISIONAL_RETRY_ENABLED:
            logger.info("Provisional invoice retry is disabled, skipping")
            return ProvisionalSweepResultDTO(
                total_checked=0,
                finalized=0,
                failures=[],
                sweep_time=utc_now(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            invoice_repo = SqlAlchemyInvoiceRepository(session)
            finalize_invoice = FinalizeInvoice(
                uow=SqlAlchemyUnitOfWork(session),
                invoice_repo=invoice_repo,
                pdf_service=self.pdf_service,
                artifact_store=self.artifact_store,
            )
            use_case = RetryProvisionalInvoices(
                invoice_repo=invoice_repo,
                finalize_invoice=finalize_invoice,
            )

            result = await use_case.execute(
                grace_seconds=ApplicationConfig.PROVISIONAL_RETRY_GRACE_SECONDS,
                limit=ApplicationConfig.PROVISIONAL_RETRY_BATCH_SIZE,
            )

            if result.is_err():
                logger.error(f"Provisional sweep failed: {result.error.message}")
                raise RuntimeError(f"Provisional sweep failed: {result.error.message}")

            response = result.value

            if response.failures:
                logger.error(
                    f"{len(response.failures)} invoices are still provisional"
                )

            return response

    async def run_forever(self, interval_seconds: int = 900):
        """
        Run sweeps continuously at specified interval

        Args:
            interval_seconds: Seconds between sweeps (default: 15 minutes)
        """
        logger.info(
            f"Starting provisional invoice retry with {interval_seconds}s interval"
        )

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Sweep complete. Checked {result.total_checked} invoices, "
                    f"finalized {result.finalized} in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Sweep cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("ProvisionalInvoiceWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.provisional_retry --once

        # Run continuously (default: PROVISIONAL_RETRY_INTERVAL_SECONDS)
        python -m src.worker.provisional_retry

        # Run continuously with custom interval (in seconds)
        python -m src.worker.provisional_retry --interval 600
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Provisional Invoice Retry Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int,
        default=ApplicationConfig.PROVISIONAL_RETRY_INTERVAL_SECONDS,
        help="Interval between runs in seconds"
    )
    args = parser.parse_args()

    worker = ProvisionalInvoiceWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Provisional sweep complete:")
            print(f"  Invoices checked: {result.total_checked}")
            print(f"  Finalized: {result.finalized}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            if result.failures:
                print("\nStill provisional:")
                for f in result.failures:
                    print(f"  - Invoice #{f.invoice_number} ({f.invoice_id}): {f.code} {f.message}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
