from datetime import date
from unittest.mock import MagicMock, patch

import pytest

import functions.fio_ingest.orchestrator as orchestrator
from functions.fio_ingest.errors import AuthenticationError
from functions.fio_ingest.models import AccountError, AccountResult
from functions.fio_ingest.orchestrator import aggregate, run_ingestion


@pytest.fixture
def mock_get():
    with patch("functions.fio_ingest.fio_client.requests.get") as mock:
        mock.return_value = MagicMock(status_code=200, content=b'{"accountStatement": {}}')
        yield mock


def _ok(account):
    return AccountResult(account=account, success=True, message="Blob uploaded successfully")


def _failed(account):
    return AccountResult(
        account=account,
        success=False,
        error=AccountError(stage="fetch", kind="HTTPStatusError", detail="failed to fetch data: boom"),
    )


def test_aggregate_all_succeeded():
    status, summary = aggregate([_ok("a"), _ok("b")])
    assert status == 200
    assert (summary.processed, summary.succeeded, summary.failed) == (2, 2, 0)


def test_aggregate_partial():
    status, summary = aggregate([_ok("a"), _failed("b")])
    assert status == 206
    assert (summary.processed, summary.succeeded, summary.failed) == (2, 1, 1)
    assert summary.results[1].status == "failed"
    assert summary.results[1].error == "failed to fetch data: boom"
    assert summary.results[1].message == ""
    assert summary.results[0].error == ""


def test_aggregate_all_failed():
    status, summary = aggregate([_failed("a"), _failed("b")])
    assert status == 500
    assert summary.succeeded == 0
    assert summary.failed == 2


def test_single_account_success(config, blob_store, mock_get):
    status, summary = run_ingestion(config, "2024-01-01", "2024-01-31")

    assert status == 200
    assert (summary.processed, summary.succeeded, summary.failed) == (1, 1, 0)
    assert summary.results[0].model_dump() == {
        "account": "invoices",
        "status": "success",
        "message": "Blob uploaded successfully",
        "error": "",
    }
    assert ("raw", "invoices/transactions_2024-01-01_2024-01-31.json") in blob_store.blobs


def test_secret_failure_for_one_account_is_partial(config, mock_get):
    cfg = config.model_copy(update={"account_aliases": ("invoices", "missing")})

    status, summary = run_ingestion(cfg, "2024-01-01", "2024-01-01")

    assert status == 206
    assert (summary.processed, summary.succeeded, summary.failed) == (2, 1, 1)
    assert summary.results[0].status == "success"
    assert summary.results[1].account == "missing"
    assert summary.results[1].status == "failed"
    assert summary.results[1].error.startswith("failed to retrieve token")
    # Only the healthy account reached the FIO API.
    assert mock_get.call_count == 1


def test_http_503_for_every_account_is_total_failure(config, secret_store, blob_store, mock_get):
    secret_store.secrets.update({"fio-token-a": "ta", "fio-token-b": "tb"})
    mock_get.return_value = MagicMock(status_code=503, text="Service Unavailable")
    cfg = config.model_copy(update={"account_aliases": ("a", "b")})

    status, summary = run_ingestion(cfg, "2024-01-01", "2024-01-01")

    assert status == 500
    assert (summary.succeeded, summary.failed) == (0, 2)
    assert all("503" in r.error for r in summary.results)
    assert blob_store.blobs == {}


def test_authentication_failure_processes_no_accounts(config, monkeypatch, secret_store, mock_get):
    def _boom():
        raise AuthenticationError("no managed identity")

    monkeypatch.setattr(orchestrator, "authenticate", _boom)

    with pytest.raises(AuthenticationError):
        run_ingestion(config)

    assert secret_store.lookups == []
    mock_get.assert_not_called()


def test_results_follow_configured_order_with_duplicates(config, secret_store, mock_get):
    secret_store.secrets.update({"fio-token-c": "tc", "fio-token-a": "ta"})
    aliases = ("savings", "c", "invoices", "a", "savings")
    cfg = config.model_copy(update={"account_aliases": aliases})

    _, summary = run_ingestion(cfg, "2024-01-01", "2024-01-01")

    assert [r.account for r in summary.results] == list(aliases)
    assert summary.processed == len(aliases)
    assert summary.succeeded + summary.failed == summary.processed
    assert secret_store.lookups == [f"fio-token-{a}" for a in aliases]


def test_missing_dates_default_to_yesterday(config, blob_store, mock_get):
    run_ingestion(config, None, "2024-01-31", today=date(2024, 3, 2))

    assert list(blob_store.blobs) == [("raw", "invoices/transactions_2024-03-01_2024-03-01.json")]
    assert "/2024-03-01/2024-03-01/" in mock_get.call_args.args[0]


def test_fio_client_uses_configured_timeout(config, mock_get):
    run_ingestion(config.model_copy(update={"http_client_timeout": 12.5}), "2024-01-01", "2024-01-01")

    assert mock_get.call_args.kwargs["timeout"] == 12.5
