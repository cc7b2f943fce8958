"""HTTP status classification shared by the provider clients."""

from typing import Any

import httpx

from searchdeck.core.exceptions import AuthFailure, MalformedResponse, ProviderError, RateLimited

AUTH_STATUS_CODES = frozenset({401, 403})


def extract_error_message(response: httpx.Response) -> str:
    """Best-effort human-readable message from a provider error body.

    Looks at ``error.message``, ``error`` (string), ``message`` and ``detail``
    in that order and falls back to the raw body or the status line.
    """
    try:
        data: Any = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str) and error:
            return error
        for key in ("message", "detail"):
            if isinstance(data.get(key), str) and data[key]:
                return data[key]

    text = response.text.strip()
    return text[:300] if text else f"HTTP {response.status_code}"


def raise_for_provider_status(response: httpx.Response, provider: str) -> None:
    """Map a non-2xx response onto the provider exception taxonomy.

    Raises:
        AuthFailure: 401/403
        RateLimited: 429
        ProviderError: any other non-2xx status
    """
    if response.is_success:
        return

    status = response.status_code
    message = extract_error_message(response)
    if status in AUTH_STATUS_CODES:
        raise AuthFailure(provider, status, message)
    if status == 429:
        raise RateLimited(provider, message)
    raise ProviderError(provider, message, status_code=status)


def transport_error(provider: str, error: httpx.HTTPError) -> ProviderError:
    """Wrap an httpx transport failure (timeout, connection reset) as ProviderError."""
    return ProviderError(provider, f"{type(error).__name__}: {error}", status_code=0)


async def send(
    client: httpx.AsyncClient, provider: str, method: str, url: str, **kwargs: Any
) -> httpx.Response:
    """Issue one request and classify its status.

    Every provider client goes through this so transport errors and status
    codes become the same exception types everywhere.
    """
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        raise transport_error(provider, e) from e
    raise_for_provider_status(response, provider)
    return response


def decode_json(response: httpx.Response, provider: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponse(provider, f"Response body is not JSON: {e}") from e
