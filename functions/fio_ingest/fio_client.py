from typing import Optional

import requests
from loguru import logger

try:  # pragma: no cover
    from .errors import HTTPStatusError, TransportError
except Exception:  # pragma: no cover
    from errors import HTTPStatusError, TransportError

FIO_API_URL = "https://fioapi.fio.cz"
DEFAULT_FORMAT = "json"
REDACTED = "***"


def redact(text: str, secret: str) -> str:
    if not secret:
        return text
    return text.replace(secret, REDACTED)


class FioClient:
    """
    Thin client over the FIO "periods" endpoint.

    The token is part of the URL path, so anything we log or put into an
    exception message goes through `redact` first. No retries: a timeout or
    non-2xx answer is terminal for the call.
    """

    def __init__(self, timeout: float, base_url: str = FIO_API_URL, debug: bool = False):
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.debug = debug

    def periods_url(self, token: str, start_date: str, end_date: str, fmt: str = DEFAULT_FORMAT) -> str:
        return f"{self.base_url}/v1/rest/periods/{token}/{start_date}/{end_date}/transactions.{fmt}"

    def fetch_transactions(
        self, token: str, start_date: str, end_date: str, fmt: Optional[str] = None
    ) -> bytes:
        url = self.periods_url(token, start_date, end_date, fmt or DEFAULT_FORMAT)
        if self.debug:
            logger.debug(f"Making API call to: {redact(url, token)}")

        try:
            resp = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"failed to call API: {redact(str(e), token)}") from None

        if not 200 <= resp.status_code < 300:
            raise HTTPStatusError(resp.status_code, redact(resp.text, token))
        return resp.content
