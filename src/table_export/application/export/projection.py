"""Application export – column projection resolver."""
from __future__ import annotations

from collections import Counter
from typing import Collection, Iterable, Sequence

from table_export.application.export.columns import Column, ColumnSource
from table_export.kernel.errors import ProjectionError

__all__ = ["available_columns", "resolve"]


def available_columns(
    columns: ColumnSource | Sequence[Column],
    show_hidden: bool = False,
) -> tuple[Column, ...]:
    """Columns the user may pick from: all of them with *show_hidden*,
    otherwise only the ones currently rendered."""
    if isinstance(columns, ColumnSource):
        return tuple(columns.columns(include_hidden=show_hidden))
    return tuple(c for c in columns if show_hidden or not c.hidden)


def resolve(
    columns: ColumnSource | Sequence[Column],
    filtered_names: Collection[str] = (),
    additional_columns: Iterable[Column] = (),
    show_hidden: bool = False,
) -> tuple[Column, ...]:
    """Return the ordered output columns for one export.

    Native columns keep their source order; a non-empty *filtered_names*
    keeps only the named ones.  *additional_columns* always follow, in the
    order given.  An empty result is valid (header-only export).

    Raises
    ------
    ProjectionError
        When *filtered_names* mentions a column that is not available, or
        when two resolved columns share a name.
    """
    native = available_columns(columns, show_hidden)

    if filtered_names:
        wanted = set(filtered_names)
        unknown = sorted(wanted - {c.name for c in native})
        if unknown:
            raise ProjectionError(
                f"Unknown column(s) requested: {', '.join(unknown)}",
                names=unknown,
            )
        native = tuple(c for c in native if c.name in wanted)

    projection = native + tuple(additional_columns)

    duplicates = sorted(name for name, count in Counter(c.name for c in projection).items() if count > 1)
    if duplicates:
        raise ProjectionError(
            f"Duplicate column name(s) in export: {', '.join(duplicates)}",
            names=duplicates,
        )
    return projection
