"""Pull-based, single-consumption completion stream.

``CompletionStream`` wraps an async source of chunks (raw bytes from the
proxy's streaming endpoint, or text deltas from the provider SDK) and hands
them to the consumer one at a time. Nothing is buffered beyond the current
chunk; the consumer's pace drives reads from the transport.

Semantics
- The stream can be iterated once. Iterating it again raises ``RuntimeError``.
- Exhaustion, an error, or :meth:`aclose` release the underlying response.
- A failure after the first chunk is never retried. Transport failures are
  surfaced as :class:`TransportError`; other failures go through the
  configured ``error_mapper``.
- Abandoning the stream without closing it leaves cleanup to the transport.
"""
from __future__ import annotations

import codecs
import logging
from typing import AsyncIterator, Awaitable, Callable, Optional, Union

import httpx

from ..errors import TransportError
from ..logging import LogContext, get_logger, normalized_log_event

Chunk = Union[bytes, str]


def default_stream_error_mapper(exc: BaseException) -> BaseException:
    """Map a mid-stream failure to the error raised to the consumer."""
    if isinstance(exc, httpx.TransportError):
        return TransportError(message=f"Stream interrupted: {exc}", raw=exc)
    return exc


class CompletionStream:
    """Lazily consumed sequence of completion chunks."""

    def __init__(
        self,
        source: AsyncIterator[Chunk],
        *,
        on_close: Optional[Callable[[], Awaitable[None]]] = None,
        error_mapper: Callable[[BaseException], BaseException] = default_stream_error_mapper,
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
        encoding: str = "utf-8",
    ) -> None:
        self._source = source
        self._on_close = on_close
        self._error_mapper = error_mapper
        self._logger = logger or get_logger("tailor_ai.streaming")
        self._ctx = ctx
        self._encoding = encoding
        self._iterating = False
        self._closed = False
        self.emitted = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "CompletionStream":
        if self._iterating or self._closed:
            raise RuntimeError("completion stream can only be consumed once")
        self._iterating = True
        return self

    async def __anext__(self) -> Chunk:
        if self._closed:
            raise StopAsyncIteration
        try:
            chunk = await self._source.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            normalized_log_event(
                self._logger, "stream.end", self._ctx, phase="finalize", emitted=self.emitted
            )
            raise
        except Exception as exc:  # noqa: BLE001 - mapped and re-raised
            await self.aclose()
            mapped = self._error_mapper(exc)
            normalized_log_event(
                self._logger,
                "stream.error",
                self._ctx,
                phase="mid_stream",
                emitted=self.emitted,
                level=logging.ERROR,
                error=str(mapped),
                error_type=type(exc).__name__,
            )
            if mapped is exc:
                raise
            raise mapped from exc
        self.emitted += 1
        return chunk

    async def iter_text(self) -> AsyncIterator[str]:
        """Yield chunks decoded as text (multi-byte sequences split across chunks are joined)."""
        decoder = codecs.getincrementaldecoder(self._encoding)(errors="replace")
        async for chunk in self:
            text = chunk if isinstance(chunk, str) else decoder.decode(chunk)
            if text:
                yield text
        tail = decoder.decode(b"", final=True)
        if tail:
            yield tail

    async def read_text(self) -> str:
        """Consume the whole stream and return the concatenated text."""
        return "".join([part async for part in self.iter_text()])

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._on_close is not None:
            await self._on_close()

    async def __aenter__(self) -> "CompletionStream":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


__all__ = ["Chunk", "CompletionStream", "default_stream_error_mapper"]
