"""
Request-scoped correlation id propagation.

The accessor keeps the current ``CorrelationIdContext`` in a ``ContextVar``.
asyncio copies the context into every task it creates, so work spawned while
handling a request sees that request's id, while requests served
concurrently each see only their own. Threads started through
``asyncio.to_thread`` or ``contextvars.copy_context().run`` inherit it too.
"""

import itertools
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from .constants import CORRELATION_ID_HEADER

_accessor_ids = itertools.count()


@dataclass(frozen=True)
class CorrelationIdContext:
    """Correlation id of one logical request and the header it travels under."""

    correlation_id: str
    header_key: str = CORRELATION_ID_HEADER


class CorrelationContextAccessor:
    """Holds at most one correlation context per logical request."""

    def __init__(self):
        self._context: ContextVar[Optional[CorrelationIdContext]] = ContextVar(
            f"correlation_context_{next(_accessor_ids)}", default=None
        )

    @property
    def context(self) -> Optional[CorrelationIdContext]:
        return self._context.get()

    @context.setter
    def context(self, value: Optional[CorrelationIdContext]) -> None:
        self._context.set(value)

    @property
    def correlation_id(self) -> Optional[str]:
        context = self._context.get()
        return context.correlation_id if context else None

    @contextmanager
    def scope(self, context: Optional[CorrelationIdContext]) -> Iterator[Optional[CorrelationIdContext]]:
        """Set ``context`` for the duration of the block, restoring the previous value on exit."""
        token = self._context.set(context)
        try:
            yield context
        finally:
            self._context.reset(token)

    def outbound_headers(self) -> Dict[str, str]:
        """Headers that forward the current correlation id to a downstream call."""
        context = self._context.get()
        if context is None:
            return {}
        return {context.header_key: context.correlation_id}


class CorrelationIdContextFactory:
    """Creates correlation contexts and publishes them through an accessor."""

    def __init__(self, accessor: CorrelationContextAccessor):
        self.accessor = accessor

    def create(self, correlation_id: str, header_key: str = CORRELATION_ID_HEADER) -> CorrelationIdContext:
        context = CorrelationIdContext(correlation_id=correlation_id, header_key=header_key)
        self.accessor.context = context
        return context


def new_correlation_id() -> str:
    """Generate a fresh correlation id."""
    return str(uuid.uuid4())
