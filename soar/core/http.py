"""
HTTP helpers shared by the remote API clients.

Every remote call is a single POST with a JSON body: no retries, no
backoff. Failures are mapped onto the RemoteServiceError hierarchy so
callers only ever handle one family of exceptions.
"""
from typing import Any, Dict, Optional

import requests

from soar.core.exceptions import (
    DecodeFailure,
    HTTPStatusFailure,
    InvalidRequest,
    TransportFailure,
)
from soar.core.logging_config import get_logger

logger = get_logger(__name__)


def post_json(
    session: requests.Session,
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: Optional[float],
    service: str,
) -> requests.Response:
    """
    POST a JSON payload and return the 2xx response.

    Raises:
        InvalidRequest: URL or body could not be used to build a request
        TransportFailure: connection error, timeout, or other network failure
        HTTPStatusFailure: non-2xx status (body kept for diagnosis)
    """
    try:
        response = session.post(url, json=payload, headers=headers, timeout=timeout)
    except (
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
        requests.exceptions.InvalidURL,
        requests.exceptions.InvalidJSONError,
    ) as e:
        raise InvalidRequest(f"Could not build {service} request: {e}", service=service) from e
    except requests.RequestException as e:
        logger.warning(f"{service} transport error for {url}: {e}")
        raise TransportFailure(f"{service} request failed: {e}", service=service) from e

    if not 200 <= response.status_code < 300:
        body = response.text
        logger.warning(
            f"{service} returned HTTP {response.status_code}: {body[:200] if body else '<empty>'}"
        )
        raise HTTPStatusFailure(response.status_code, service=service, body=body)

    return response


def decode_json(response: requests.Response, service: str) -> Any:
    """Parse a response body as JSON, raising DecodeFailure with the raw body."""
    try:
        return response.json()
    except ValueError as e:
        raw = response.text
        logger.error(f"{service} returned invalid JSON: {e}. Raw response: {raw[:1000]}")
        raise DecodeFailure(f"{service} returned invalid JSON", service=service, raw_body=raw) from e
