import pytest
from flask import Flask

from functions.fio_ingest.config import Config, reset_config


@pytest.fixture()
def app() -> Flask:
    return Flask(__name__)


@pytest.fixture()
def config() -> Config:
    return Config(
        key_vault_url="https://kv-test.vault.azure.net",
        storage_account_url="https://satest.blob.core.windows.net/",
        storage_container_name="raw",
        account_aliases=("invoices",),
        http_client_timeout=5.0,
    )


@pytest.fixture()
def secret_store():
    from tests.fakes.stores import FakeSecretStore

    return FakeSecretStore({"fio-token-invoices": "tok-invoices", "fio-token-savings": "tok-savings"})


@pytest.fixture()
def blob_store():
    from tests.fakes.stores import FakeBlobStore

    return FakeBlobStore()


@pytest.fixture(autouse=True)
def patch_azure(monkeypatch, secret_store, blob_store):
    """
    Point the orchestrator at in-memory Azure fakes.

    Keeps tests offline; no credential chain, vault or storage account is touched.
    """
    import functions.fio_ingest.orchestrator as orchestrator
    from tests.fakes.stores import FakeCredential

    monkeypatch.setattr(orchestrator, "authenticate", lambda: FakeCredential())
    monkeypatch.setattr(orchestrator, "KeyVaultSecretRetriever", lambda _url, _cred: secret_store)
    monkeypatch.setattr(orchestrator, "BlobPersister", lambda _url, _cred: blob_store)

    reset_config()
    yield
    reset_config()
