"""Lazy, forward-only iteration over a paginated listing action.

Example:
    ```python
    cursor = PaginationCursor(AllPageTitles(version=version), client.execute)
    for title in cursor:
        ...
    ```

Only one page is held in memory. A round trip happens only when the buffered
page is used up and another item is requested, so abandoning the cursor
never triggers an extra request.
"""

import logging
from collections import deque
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from wikiapi_core.actions.base import ListingAction
from wikiapi_core.actions.envelope import HttpActionEnvelope

logger = logging.getLogger(__name__)

T = TypeVar("T")

Executor = Callable[[HttpActionEnvelope], str]


class PaginationCursor(Iterator[T], Generic[T]):
    """Iterate the items of a ListingAction across round trips.

    The cursor ends when the action is done, when the server hands out a
    continuation token it already sent earlier, after ``close()``, or once a
    round trip has raised. It cannot be restarted; create a new action to
    enumerate again.

    Args:
        action: Fresh listing action.
        execute: Sends an envelope and returns the response text.
    """

    def __init__(self, action: ListingAction[T], execute: Executor):
        self._action = action
        self._execute = execute
        self._buffer: deque[T] = deque()
        self._seen_tokens: set[str] = set()
        self._last_token: str | None = None
        self._exhausted = False

    @property
    def action(self) -> ListingAction[T]:
        return self._action

    @property
    def last_token(self) -> str | None:
        """Last continuation token observed."""
        return self._last_token

    @property
    def exhausted(self) -> bool:
        return self._exhausted and not self._buffer

    def __iter__(self) -> "PaginationCursor[T]":
        return self

    def __next__(self) -> T:
        while not self._buffer:
            if self._exhausted:
                raise StopIteration
            self._fetch_page()
        return self._buffer.popleft()

    def close(self) -> None:
        """Stop iterating and drop the buffered page."""
        self._exhausted = True
        self._buffer.clear()

    def _fetch_page(self) -> None:
        envelope = self._action.next_envelope()
        if envelope is None:
            self._exhausted = True
            return

        try:
            self._action.consume(self._execute(envelope))
        except Exception:
            self._exhausted = True
            raise
        self._buffer.extend(self._action.take_batch())

        if self._action.is_done():
            self._exhausted = True
            return

        token = self._action.continuation_token
        if token in self._seen_tokens:
            logger.warning(
                f"{type(self._action).__name__} got continuation token {token!r} again, stopping to avoid a loop"
            )
            self._exhausted = True
            return
        self._seen_tokens.add(token)
        self._last_token = token
