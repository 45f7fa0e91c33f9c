import json
from typing import Any, Dict

import functions_framework
from flask import Response, make_response
from loguru import logger

# Support both "run as a package" (relative imports) and "run from this folder" (local imports).
try:  # pragma: no cover
    from .config import get_config
    from .errors import AuthenticationError
    from .orchestrator import run_ingestion
except Exception:  # pragma: no cover
    from config import get_config
    from errors import AuthenticationError
    from orchestrator import run_ingestion

HEALTH_BODY = "OK"


def _json_response(payload: Any, status: int = 200) -> Response:
    resp = make_response(json.dumps(payload, ensure_ascii=False), status)
    resp.headers["Content-Type"] = "application/json; charset=utf-8"
    resp.headers["Access-Control-Allow-Origin"] = "*"
    resp.headers["Access-Control-Allow-Methods"] = "GET,OPTIONS"
    return resp


def _error(message: str, status: int = 400, extra: Dict[str, Any] | None = None) -> Response:
    body: Dict[str, Any] = {"error": message}
    if extra:
        body.update(extra)
    return _json_response(body, status=status)


def _health() -> Response:
    resp = make_response(HEALTH_BODY, 200)
    resp.headers["Content-Type"] = "text/plain; charset=utf-8"
    return resp


@functions_framework.http
def fio_ingest(request):
    """
    HTTP entry point: pull FIO transactions for all configured accounts into Blob Storage.

    Paths:
      - GET /?startDate=YYYY-MM-DD&endDate=YYYY-MM-DD
      - GET /health

    Responds 200 when every account succeeded, 206 on partial success and
    500 when all accounts failed or authentication did.
    """
    if request.method == "OPTIONS":
        return _json_response({}, status=204)

    path = request.path or "/"
    parts = [p for p in path.split("/") if p]

    if parts == ["health"]:
        return _health()

    if parts:
        return _error("Not found", 404)

    if request.method != "GET":
        return _error("Method not allowed", 405)

    logger.info(f"Received request from {request.remote_addr}")
    try:
        status, summary = run_ingestion(
            get_config(),
            request.args.get("startDate"),
            request.args.get("endDate"),
        )
    except AuthenticationError as e:
        logger.error(f"Authentication failed: {e.message}")
        return _error("Authentication failed", 500)
    except Exception as e:
        logger.exception("Unexpected error during ingestion")
        return _error(f"Internal server error: {str(e)}", status=500)

    return _json_response(summary.model_dump(), status=status)
