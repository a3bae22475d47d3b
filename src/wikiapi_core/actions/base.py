"""Action state machine shared by all API operations.

An action turns one logical operation into an ordered chain of HTTP round
trips. A driver repeatedly asks for the next envelope, executes it and feeds
the response text back:

    ```python
    action = AllPageTitles(version=Version.MW1_15)
    while (envelope := action.next_envelope()) is not None:
        action.consume(driver.execute(envelope))
    ```

States move ``INIT -> AWAITING_RESPONSE -> {AWAITING_RESPONSE | DONE | FAILED}``.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar, Generic, TypeVar

from wikiapi_core.actions.envelope import HttpActionEnvelope
from wikiapi_core.errors.exceptions import ProtocolMisuse
from wikiapi_core.parsing.converter import XmlConverter
from wikiapi_core.parsing.element import XmlElement
from wikiapi_core.versions import ALL_VERSIONS, DEFAULT_REGISTRY, Version, VersionRegistry

logger = logging.getLogger(__name__)

API_PATH = "/api.php"

T = TypeVar("T")


class ActionState(Enum):
    INIT = "init"
    AWAITING_RESPONSE = "awaiting_response"
    DONE = "done"
    FAILED = "failed"


class Action(ABC):
    """One logical operation, possibly spanning several round trips.

    Subclasses declare ``SUPPORTED_VERSIONS`` and implement ``_build_envelope``
    and ``_process``. The support check runs in the constructor, so an
    unsupported dialect is refused before any envelope exists.

    Args:
        version: Detected server dialect. None means the dialect is unknown.
        registry: Registry used for the support check.
        converter: Response parser. A converter with the default logging
            reporter is used when omitted.

    Raises:
        VersionMismatch: If ``version`` is not in ``SUPPORTED_VERSIONS``.
    """

    SUPPORTED_VERSIONS: ClassVar[frozenset[Version]] = ALL_VERSIONS

    def __init__(
        self,
        *,
        version: Version | None = None,
        registry: VersionRegistry = DEFAULT_REGISTRY,
        converter: XmlConverter | None = None,
    ):
        detected = version if version is not None else Version.UNKNOWN
        registry.ensure_supported(type(self).__name__, detected, self.SUPPORTED_VERSIONS)

        self.version = detected
        self.dialect = registry.effective(detected)
        self._registry = registry
        self._converter = converter or _DEFAULT_CONVERTER
        self._state = ActionState.INIT
        self._pending: HttpActionEnvelope | None = None
        self._token: str | None = None
        self._failure: Exception | None = None
        self._rounds = 0

    @property
    def state(self) -> ActionState:
        return self._state

    @property
    def continuation_token(self) -> str | None:
        """Token from the most recently consumed response, if any."""
        return self._token

    @property
    def failure(self) -> Exception | None:
        return self._failure

    @property
    def rounds(self) -> int:
        """Number of responses consumed so far."""
        return self._rounds

    def is_done(self) -> bool:
        return self._state is ActionState.DONE

    def next_envelope(self) -> HttpActionEnvelope | None:
        """Return the request for the next round trip, or None when done.

        Raises:
            ProtocolMisuse: If the previous envelope has not been answered or
                the action already failed.
        """
        if self._state is ActionState.DONE:
            return None
        if self._state is ActionState.FAILED:
            raise ProtocolMisuse(f"{type(self).__name__} already failed") from self._failure
        if self._pending is not None:
            raise ProtocolMisuse(f"{type(self).__name__} is still waiting for a response to {self._pending!r}")

        if self._state is ActionState.INIT:
            envelope = self._build_envelope(None)
            self._state = ActionState.AWAITING_RESPONSE
        else:
            envelope = self._build_envelope(self._token)

        self._pending = envelope
        logger.debug(f"{type(self).__name__} round {self._rounds + 1}: {envelope!r}")
        return envelope

    def consume(self, text: str) -> None:
        """Feed the response text for the most recent envelope.

        Any exception raised while processing the response leaves the action
        FAILED.

        Raises:
            ProtocolMisuse: If no envelope is outstanding.
            ActionFailure: If the response is malformed or reports an error.
        """
        if self._pending is None:
            raise ProtocolMisuse(f"{type(self).__name__} received a response without an outstanding request")
        self._pending = None
        self._rounds += 1

        try:
            root = self._converter.get_checked(text)
            token = self._process(root)
        except Exception as e:
            self._state = ActionState.FAILED
            self._failure = e
            raise

        self._token = token
        if token is None:
            self._state = ActionState.DONE

    @abstractmethod
    def _build_envelope(self, token: str | None) -> HttpActionEnvelope:
        """Build the envelope for the first round (token None) or a continuation."""

    @abstractmethod
    def _process(self, root: XmlElement) -> str | None:
        """Extract results from a checked response; return the continuation token."""


class ListingAction(Action, Generic[T]):
    """Multi-round action yielding a batch of items per response."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._batch: list[T] = []

    def take_batch(self) -> list[T]:
        """Hand over the items of the last response and clear them."""
        batch, self._batch = self._batch, []
        return batch


_DEFAULT_CONVERTER = XmlConverter()
