"""Mapping of HTTP responses onto transport faults."""

import httpx

from wikiapi_core.errors.exceptions import ClientError, ServerError, TransportFault


def raise_for_status(response: httpx.Response) -> None:
    """Raise a TransportFault subclass for non-success HTTP responses.

    MediaWiki reports semantic failures inside a 200 response body, so only
    the status code is considered here.

    Args:
        response: HTTP response object

    Raises:
        TransportFault subclass based on status code
    """
    if response.is_success:
        return

    status_code = response.status_code

    if 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = TransportFault

    response_text = response.text[:200]
    message = f"HTTP {status_code}: {response_text}" if response_text else f"HTTP {status_code}"

    raise exc_class(message, status_code=status_code, response=response)
