from datetime import date
from typing import List, Optional, Sequence, Tuple

from loguru import logger

try:  # pragma: no cover
    from .azure_clients import BlobPersister, KeyVaultSecretRetriever, authenticate
    from .config import Config
    from .dates import resolve_date_range
    from .fio_client import FioClient
    from .models import AccountResult, IngestSummary, ResultEntry
    from .processor import PipelineContext, process_account
except Exception:  # pragma: no cover
    from azure_clients import BlobPersister, KeyVaultSecretRetriever, authenticate
    from config import Config
    from dates import resolve_date_range
    from fio_client import FioClient
    from models import AccountResult, IngestSummary, ResultEntry
    from processor import PipelineContext, process_account

STATUS_OK = 200
STATUS_PARTIAL = 206
STATUS_FAILED = 500


def _entry(result: AccountResult) -> ResultEntry:
    return ResultEntry(
        account=result.account,
        status=result.status,
        message=result.message or "",
        error=result.error.detail if result.error else "",
    )


def aggregate(results: Sequence[AccountResult]) -> Tuple[int, IngestSummary]:
    processed = len(results)
    succeeded = sum(1 for r in results if r.success)

    if succeeded == 0:
        status = STATUS_FAILED
    elif succeeded < processed:
        status = STATUS_PARTIAL
    else:
        status = STATUS_OK

    summary = IngestSummary(
        processed=processed,
        succeeded=succeeded,
        failed=processed - succeeded,
        results=[_entry(r) for r in results],
    )
    return status, summary


def run_ingestion(
    config: Config,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    today: Optional[date] = None,
) -> Tuple[int, IngestSummary]:
    """
    Pull every configured account for one date range.

    Raises AuthenticationError before touching any account; all other
    failures are folded into the per-account results.
    """
    credential = authenticate()

    period = resolve_date_range(start_date, end_date, today=today)
    logger.info(f"Fetching transactions from {period.start} to {period.end}")

    accounts = list(config.account_aliases)
    logger.info(f"Processing {len(accounts)} accounts: {accounts}")

    ctx = PipelineContext(
        secrets=KeyVaultSecretRetriever(config.key_vault_url, credential),
        fio=FioClient(config.http_client_timeout, base_url=config.fio_api_url, debug=config.debug),
        blobs=BlobPersister(config.storage_account_url, credential),
        container=config.storage_container_name,
    )

    # One account at a time; results keep the configured order.
    results: List[AccountResult] = []
    for account in accounts:
        results.append(process_account(ctx, account, period.start, period.end))

    status, summary = aggregate(results)
    logger.info(f"Processed {summary.processed} accounts: {summary.succeeded} succeeded, {summary.failed} failed")
    return status, summary
