"""FastAPI adapter – streaming download response."""
from __future__ import annotations

from urllib.parse import quote

from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from starlette.types import Receive, Scope, Send

from table_export.application.export.service import ExportResult
from table_export.application.export.stream import ExportStream

__all__ = ["ExportStreamingResponse", "content_disposition", "export_streaming_response"]


def content_disposition(file_name: str) -> str:
    """``attachment`` header value with an RFC 5987 UTF-8 fallback."""
    ascii_name = file_name.encode("ascii", "replace").decode("ascii").replace('"', "'")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(file_name)}"


class ExportStreamingResponse(StreamingResponse):
    """``StreamingResponse`` that always closes its :class:`ExportStream`.

    Starlette skips the background task when the client disconnects
    (``ClientDisconnect`` under ASGI 2.4+), so the stream is also closed
    when the response call exits for any reason.
    """

    def __init__(self, stream: ExportStream, **kwargs) -> None:
        super().__init__(stream, **kwargs)
        self.export_stream = stream

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            self.export_stream.close()


def export_streaming_response(result: ExportResult) -> ExportStreamingResponse:
    """Wrap an :class:`ExportResult` in a streaming download response.

    The export stream is closed after the response finishes, releasing the
    record source even if the body was not fully sent.
    """
    return ExportStreamingResponse(
        result.stream,
        media_type=result.content_type,
        headers={"Content-Disposition": content_disposition(result.file_name)},
        background=BackgroundTask(result.stream.close),
    )
