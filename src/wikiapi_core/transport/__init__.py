"""Transport layers for the synchronous wiki client.

Example:
    ```python
    from wikiapi_core.transport import IdempotentOnlyRetry

    transport = IdempotentOnlyRetry(wrapped_transport=httpx.HTTPTransport())
    ```
"""

from wikiapi_core.transport.retry import IdempotentOnlyRetry

__all__ = ["IdempotentOnlyRetry"]
