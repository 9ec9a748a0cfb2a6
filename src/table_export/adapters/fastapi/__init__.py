"""FastAPI adapter – streaming download responses and error mapping."""
from table_export.adapters.fastapi.exception_mapper import ExportExceptionMapper
from table_export.adapters.fastapi.responses import (
    ExportStreamingResponse,
    content_disposition,
    export_streaming_response,
)

__all__ = [
    "ExportExceptionMapper",
    "ExportStreamingResponse",
    "content_disposition",
    "export_streaming_response",
]
