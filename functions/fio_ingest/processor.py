from dataclasses import dataclass
from typing import Any

from loguru import logger

try:  # pragma: no cover
    from .errors import FetchError, IngestError, PersistError, SecretRetrievalError
    from .models import AccountError, AccountResult
    from .naming import blob_name_for, secret_name_for
except Exception:  # pragma: no cover
    from errors import FetchError, IngestError, PersistError, SecretRetrievalError
    from models import AccountError, AccountResult
    from naming import blob_name_for, secret_name_for


@dataclass(frozen=True)
class PipelineContext:
    """Per-request collaborators shared by every account in that request."""

    secrets: Any  # get_secret(name) -> str
    fio: Any  # fetch_transactions(token, start, end) -> bytes
    blobs: Any  # upload(container, blob_name, data) -> str
    container: str


def _failed(account: str, prefix: str, err: IngestError) -> AccountResult:
    return AccountResult(
        account=account,
        success=False,
        error=AccountError(stage=err.stage, kind=type(err).__name__, detail=f"{prefix}: {err.message}"),
    )


def process_account(ctx: PipelineContext, account: str, start_date: str, end_date: str) -> AccountResult:
    """
    Secret -> fetch -> upload for one account.

    Stage errors end this account's run and come back as a failed result;
    they never reach the caller.
    """
    logger.info(f"[{account}] Starting processing")

    secret_name = secret_name_for(account)
    try:
        token = ctx.secrets.get_secret(secret_name)
    except SecretRetrievalError as e:
        logger.error(f"[{account}] Failed to retrieve token from secret '{secret_name}': {e.message}")
        return _failed(account, "failed to retrieve token", e)

    try:
        data = ctx.fio.fetch_transactions(token, start_date, end_date)
    except FetchError as e:
        logger.error(f"[{account}] Error fetching data: {e.message}")
        return _failed(account, "failed to fetch data", e)

    blob_name = blob_name_for(account, start_date, end_date)
    try:
        message = ctx.blobs.upload(ctx.container, blob_name, data)
    except PersistError as e:
        logger.error(f"[{account}] Error writing blob '{blob_name}': {e.message}")
        return _failed(account, "failed to write blob", e)

    logger.info(f"[{account}] Successfully wrote blob: {blob_name}")
    return AccountResult(account=account, success=True, message=message)
