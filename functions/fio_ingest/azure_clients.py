"""
Azure collaborators: ambient credential, Key Vault secrets and Blob Storage.

Each wrapper turns SDK failures into the matching stage error so callers
only ever deal with the ingestion taxonomy. SDK clients are built per call;
a bad vault or storage URL fails the account being processed, not the request.
"""

from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient
from azure.storage.blob import BlobServiceClient
from loguru import logger

try:  # pragma: no cover
    from .errors import AuthenticationError, PersistError, SecretRetrievalError
except Exception:  # pragma: no cover
    from errors import AuthenticationError, PersistError, SecretRetrievalError

UPLOAD_OK_MESSAGE = "Blob uploaded successfully"


def authenticate():
    """
    Build the ambient DefaultAzureCredential.

    The credential is lazy: no token is requested here, so a missing identity
    only surfaces later, as a SecretRetrievalError on each account.
    """
    try:
        return DefaultAzureCredential()
    except (AzureError, ValueError) as e:
        logger.error(f"Failed to create DefaultAzureCredential: {e}")
        raise AuthenticationError(f"failed to create credential: {e}") from e


class KeyVaultSecretRetriever:
    """Looks secrets up on every call; nothing is cached between accounts."""

    def __init__(self, vault_url: str, credential):
        self.vault_url = vault_url
        self.credential = credential

    def get_secret(self, name: str) -> str:
        try:
            with SecretClient(vault_url=self.vault_url, credential=self.credential) as client:
                secret = client.get_secret(name)
        except (AzureError, ValueError) as e:
            logger.error(f"KeyVault get secret '{name}' failed: {e}")
            raise SecretRetrievalError(str(e)) from e
        if not secret.value:
            raise SecretRetrievalError(f"secret '{name}' has no value")
        return secret.value


class BlobPersister:
    def __init__(self, account_url: str, credential):
        self.account_url = account_url
        self.credential = credential

    def upload(self, container_name: str, blob_name: str, data: bytes) -> str:
        try:
            service = BlobServiceClient(account_url=self.account_url, credential=self.credential)
        except (AzureError, ValueError) as e:
            raise PersistError(f"failed to create blob client: {e}") from e
        try:
            with service:
                blob = service.get_blob_client(container=container_name, blob=blob_name)
                blob.upload_blob(data, overwrite=True)
        except AzureError as e:
            raise PersistError(f"failed to upload blob: {e}") from e
        return UPLOAD_OK_MESSAGE
