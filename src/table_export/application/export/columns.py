"""Application export – Column, ColumnKind and column sources."""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from table_export.application.export.templates import TemplateRenderer

__all__ = [
    "Column",
    "ColumnKind",
    "ColumnSource",
    "StaticColumnSource",
    "additional_columns",
    "default_label",
    "extract_state",
]


class ColumnKind(str, Enum):
    """How a column's state becomes a cell."""

    TEXT = "text"
    IMAGE = "image"
    RICHVIEW = "richview"
    CUSTOM = "custom"


def default_label(name: str) -> str:
    """``"author.first_name"`` → ``"Author First Name"``."""
    return name.replace(".", " ").replace("_", " ").title()


def extract_state(record: Any, path: str) -> Any:
    """Resolve a dotted *path* against *record*.

    Each segment is looked up as a mapping key first, then as an attribute.
    A missing segment yields ``None`` rather than raising, the same way an
    absent relation renders as an empty cell in the host table.
    """
    value = record
    for segment in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(segment)
        else:
            value = getattr(value, segment, None)
    return value


@dataclasses.dataclass(frozen=True)
class Column:
    """One output column.

    ``state`` extracts the raw value from a record (defaults to a dotted-path
    lookup on ``name``); ``format_state`` turns it into its display form.
    ``image_path`` and ``render`` are only consulted for ``IMAGE`` and
    ``RICHVIEW`` columns respectively.
    """

    name: str
    label: str = ""
    kind: ColumnKind = ColumnKind.TEXT
    state: Callable[[Any], Any] | None = dataclasses.field(default=None, compare=False)
    format_state: Callable[[Any], Any] | None = dataclasses.field(default=None, compare=False)
    image_path: Callable[[Any], Any] | None = dataclasses.field(default=None, compare=False)
    render: Callable[[Any], str] | None = dataclasses.field(default=None, compare=False)
    hidden: bool = False
    additional: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("column name must not be empty")
        if not self.label:
            object.__setattr__(self, "label", default_label(self.name))
        if not isinstance(self.kind, ColumnKind):
            object.__setattr__(self, "kind", ColumnKind(self.kind))

    def value(self, record: Any) -> Any:
        """Return the formatted state of this column for *record*."""
        state = self.state(record) if self.state is not None else extract_state(record, self.name)
        if self.format_state is not None:
            state = self.format_state(state)
        return state

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def text(
        cls,
        name: str,
        label: str = "",
        *,
        state: Callable[[Any], Any] | None = None,
        format_state: Callable[[Any], Any] | None = None,
        hidden: bool = False,
    ) -> "Column":
        return cls(name, label, ColumnKind.TEXT, state=state, format_state=format_state, hidden=hidden)

    @classmethod
    def image(
        cls,
        name: str,
        label: str = "",
        *,
        state: Callable[[Any], Any] | None = None,
        image_path: Callable[[Any], Any] | None = None,
        base_url: str | None = None,
        hidden: bool = False,
    ) -> "Column":
        """Image column; the cell holds the image path, never the raw state.

        ``base_url`` is a shortcut for ``image_path`` that prefixes the
        stored path (``"https://cdn/x"`` + ``"a.png"`` → ``"https://cdn/x/a.png"``).
        """
        if image_path is None and base_url is not None:
            prefix = base_url.rstrip("/")

            def image_path(state: Any) -> Any:
                if state in (None, ""):
                    return None
                return f"{prefix}/{str(state).lstrip('/')}"

        return cls(name, label, ColumnKind.IMAGE, state=state, image_path=image_path, hidden=hidden)

    @classmethod
    def view(
        cls,
        name: str,
        label: str = "",
        *,
        template: str | None = None,
        renderer: "TemplateRenderer | None" = None,
        render: Callable[[Any], str] | None = None,
        state: Callable[[Any], Any] | None = None,
        hidden: bool = False,
    ) -> "Column":
        """Rich view column rendered to markup, exported as plain text.

        Pass either ``render`` directly or a ``template`` plus ``renderer``;
        the template receives ``record``, ``state`` and ``column``.
        """
        if render is None:
            if template is None or renderer is None:
                raise ValueError("a view column needs either render or template and renderer")
            extractor = state

            def render(record: Any) -> str:
                value = extractor(record) if extractor is not None else extract_state(record, name)
                return renderer.render(template, {"record": record, "state": value, "column": name})

        return cls(name, label, ColumnKind.RICHVIEW, state=state, render=render, hidden=hidden)

    @classmethod
    def additional(cls, name: str, default: Any = None, label: str = "") -> "Column":
        """Synthetic column whose every cell is *default*."""
        return cls(
            name,
            label or name,
            ColumnKind.TEXT,
            state=lambda _record: default,
            additional=True,
        )


def additional_columns(value: Mapping[str, Any] | Iterable[Column] | None) -> tuple[Column, ...]:
    """Normalise user-supplied extra columns.

    Accepts the export form's ``{title: default value}`` mapping (insertion
    order preserved) or ready-made :class:`Column` objects.
    """
    if not value:
        return ()
    if isinstance(value, Mapping):
        return tuple(Column.additional(str(title), default) for title, default in value.items())
    columns = tuple(value)
    return tuple(c if c.additional else dataclasses.replace(c, additional=True) for c in columns)


@runtime_checkable
class ColumnSource(Protocol):
    """Port: the host table's column set."""

    def columns(self, include_hidden: bool = False) -> Sequence[Column]: ...


class StaticColumnSource:
    """:class:`ColumnSource` over a fixed list of columns."""

    def __init__(self, columns: Iterable[Column]) -> None:
        self._columns = tuple(columns)

    def columns(self, include_hidden: bool = False) -> Sequence[Column]:
        if include_hidden:
            return self._columns
        return tuple(c for c in self._columns if not c.hidden)

    def __len__(self) -> int:
        return len(self._columns)
