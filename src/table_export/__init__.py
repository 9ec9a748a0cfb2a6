"""
table_export – tabular export pipeline (CSV / XLSX / PDF).

Import path convention::

    from table_export.application.export import Column, ExportRequest, ExportService
    from table_export.config.settings import ExportSettings, load_export_settings
    from table_export.kernel.errors import ExportError
    from table_export.adapters.fastapi import export_streaming_response
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
