"""Application export – ExportStream, the lazily produced download body."""
from __future__ import annotations

from typing import IO, Any, Callable, Iterator

from table_export.kernel.errors import TransportError
from table_export.observability.logging import get_logger

__all__ = ["ExportStream"]

logger = get_logger(__name__)

_DISCONNECT_ERRORS: tuple[type[BaseException], ...] = (BrokenPipeError, ConnectionError, TransportError)


class ExportStream(Iterator[bytes]):
    """Iterator of encoded byte chunks.

    Nothing is encoded until the first chunk is requested.  :meth:`close` is
    idempotent; it stops the encoder and releases the record source, whether
    or not the stream was fully consumed.
    """

    def __init__(self, chunks: Iterator[bytes], *, on_close: Callable[[], None] | None = None) -> None:
        self._chunks = chunks
        self._on_close = on_close
        self._closed = False
        self.cancelled = False
        self.bytes_sent = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> "ExportStream":
        return self

    def __next__(self) -> bytes:
        if self._closed:
            raise StopIteration
        try:
            chunk = next(self._chunks)
        except BaseException:
            # exhausted or failed
            self.close()
            raise
        self.bytes_sent += len(chunk)
        return chunk

    def __enter__(self) -> "ExportStream":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            close = getattr(self._chunks, "close", None)
            if close is not None:
                close()
        finally:
            if self._on_close is not None:
                self._on_close()

    def read(self) -> bytes:
        """Consume the whole stream into memory (small exports, tests)."""
        with self:
            return b"".join(self)

    def write_to(
        self,
        sink: IO[bytes] | Callable[[bytes], Any],
        *,
        is_connected: Callable[[], bool] | None = None,
    ) -> int:
        """Copy every chunk into *sink* (a binary file or a ``write`` callable).

        The receiver is checked before each chunk is produced: a sink whose
        ``closed`` attribute is true, or an *is_connected* callable returning
        false, stops the copy before another record is pulled.  A failing
        write (``BrokenPipeError``, ``ConnectionError``,
        :class:`TransportError`, or ``ValueError`` from a sink that has
        closed) is treated the same way.  Cancellation closes the stream and
        raises nothing; any other failure closes the stream and propagates.

        Returns the number of bytes handed to *sink*.
        """
        write: Callable[[bytes], Any] = sink if callable(sink) else sink.write

        def connected() -> bool:
            if getattr(sink, "closed", False):
                return False
            return is_connected is None or is_connected()

        written = 0
        with self:
            while connected():
                try:
                    chunk = next(self)
                except StopIteration:
                    return written
                try:
                    write(chunk)
                except _DISCONNECT_ERRORS as exc:
                    self._cancel(written, type(exc).__name__)
                    return written
                except ValueError:
                    if connected():
                        raise
                    self._cancel(written, "ValueError")
                    return written
                written += len(chunk)
            self._cancel(written, "closed")
        return written

    def _cancel(self, written: int, reason: str) -> None:
        self.cancelled = True
        logger.info("export.client_disconnected", bytes_written=written, error=reason)
