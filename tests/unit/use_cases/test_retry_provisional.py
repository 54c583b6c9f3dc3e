"""Unit tests for RetryProvisionalInvoices use case"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

from libs.result import Error, Return
from src.app.use_cases.invoices.retry_provisional import RetryProvisionalInvoices


@pytest.fixture
def mock_finalize():
    finalize = MagicMock()
    finalize.execute = AsyncMock()
    return finalize


@pytest.mark.asyncio
class TestRetryProvisionalInvoices:
    async def test_sweep_finalizes_and_reports_failures(
        self, mock_invoice_repo, mock_finalize, make_invoice
    ):
        """
        Given: Two provisional invoices, one of which still cannot be uploaded
        When: The sweep runs
        Then: One is finalized and the other is reported as a failure
        """
        # Arrange
        mock_invoice_repo.list_provisional = AsyncMock(
            return_value=[
                make_invoice(invoice_number=1, invoice_id="inv-1"),
                make_invoice(invoice_number=2, invoice_id="inv-2"),
            ]
        )
        mock_finalize.execute = AsyncMock(
            side_effect=[
                Return.ok(MagicMock()),
                Return.err(Error(code="UPLOAD_FAILED", message="Failed to upload artifact")),
            ]
        )
        use_case = RetryProvisionalInvoices(mock_invoice_repo, mock_finalize)

        # Act
        result = await use_case.execute(grace_seconds=600, limit=10)

        # Assert
        assert result.is_ok()
        sweep = result.value
        assert sweep.total_checked == 2
        assert sweep.finalized == 1
        assert len(sweep.failures) == 1
        assert sweep.failures[0].invoice_id == "inv-2"
        assert sweep.failures[0].invoice_number == 2
        assert sweep.failures[0].code == "UPLOAD_FAILED"

        kwargs = mock_invoice_repo.list_provisional.await_args.kwargs
        assert kwargs["limit"] == 10
        assert kwargs["created_before"] <= datetime.now(timezone.utc) - timedelta(seconds=599)
        assert [c.args[0] for c in mock_finalize.execute.await_args_list] == ["inv-1", "inv-2"]

    async def test_nothing_to_do(self, mock_invoice_repo, mock_finalize):
        mock_invoice_repo.list_provisional = AsyncMock(return_value=[])

        result = await RetryProvisionalInvoices(mock_invoice_repo, mock_finalize).execute()

        assert result.is_ok()
        assert result.value.total_checked == 0
        assert result.value.finalized == 0
        mock_finalize.execute.assert_not_awaited()

    async def test_listing_error(self, mock_invoice_repo, mock_finalize):
        mock_invoice_repo.list_provisional = AsyncMock(side_effect=Exception("db down"))

        result = await RetryProvisionalInvoices(mock_invoice_repo, mock_finalize).execute()

        assert result.is_err()
        assert result.error.code == "PROVISIONAL_SWEEP_FAILED"
