"""Application export – row materializer.

Turns records into ``{column name: cell string}`` rows, one lazy forward
pass.  Formatting is chosen by :class:`ColumnKind` through
``KIND_FORMATTERS``; list states are joined before kind dispatch.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Sequence

from markupsafe import Markup

from table_export.application.export.columns import Column, ColumnKind
from table_export.kernel.errors import ExportError, MaterializationError

__all__ = ["KIND_FORMATTERS", "LIST_SEPARATOR", "cell_value", "materialize", "strip_markup"]

LIST_SEPARATOR = ", "

Row = dict[str, str]


def strip_markup(markup: str) -> str:
    """Drop tags, unescape entities and collapse whitespace runs."""
    return Markup(markup).striptags()


def _plain(column: Column, record: Any, state: Any) -> Any:  # noqa: ARG001
    return state


def _image(column: Column, record: Any, state: Any) -> Any:  # noqa: ARG001
    if column.image_path is None:
        return state
    return column.image_path(state)


def _richview(column: Column, record: Any, state: Any) -> Any:
    if column.render is None:
        return state
    return strip_markup(str(column.render(record)))


KIND_FORMATTERS: dict[ColumnKind, Callable[[Column, Any, Any], Any]] = {
    ColumnKind.TEXT: _plain,
    ColumnKind.IMAGE: _image,
    ColumnKind.RICHVIEW: _richview,
    ColumnKind.CUSTOM: _plain,
}


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Markup):
        return strip_markup(value)
    return str(value)


def cell_value(column: Column, record: Any) -> str:
    """Evaluate one cell.  Exceptions propagate unchanged."""
    state = column.value(record)
    if isinstance(state, (list, tuple, set, frozenset)):
        return LIST_SEPARATOR.join(_to_text(item) for item in state)
    return _to_text(KIND_FORMATTERS[column.kind](column, record, state))


def materialize(records: Iterable[Any], projection: Sequence[Column]) -> Iterator[Row]:
    """Yield one row per record, cells keyed by column name in projection order.

    Any failure while evaluating a cell aborts the export with
    :class:`MaterializationError`; no cell is silently blanked.
    """
    for index, record in enumerate(records):
        row: Row = {}
        for column in projection:
            try:
                row[column.name] = cell_value(column, record)
            except ExportError:
                raise
            except Exception as exc:
                raise MaterializationError(column.name, index, cause=exc) from exc
        yield row
