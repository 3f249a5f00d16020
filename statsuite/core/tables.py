"""
Result tables handed to the host renderer.

A Table has a title, a tree of column headers and a list of rows. Rows are
a tagged sum type: a LeafRow carries cells keyed by leaf column key, a
GroupRow nests further rows under a shared row-header prefix (the renderer
draws it as a spanning label).

to_dict() produces the wire form the renderer consumes:

    {
        "title": "ANOVA",
        "columnHeaders": [{"header": "Model"}, {"header": "Sum of Squares"}, ...],
        "rows": [
            {"rowHeader": ["1", "Regression"], "Sum of Squares": 12.3, ...},
            {"rowHeader": ["Total"], "children": [...]},
        ],
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union
import numpy as np


@dataclass(frozen=True)
class ColumnHeader:
    """
    One node of the column-header tree.

    Leaves name a cell key (defaults to the header text). Interior nodes
    group their children under a spanning header.
    """
    header: str
    key: str | None = None
    children: tuple[ColumnHeader, ...] = ()

    @property
    def cell_key(self) -> str:
        return self.key if self.key is not None else self.header

    def leaves(self) -> list[ColumnHeader]:
        if not self.children:
            return [self]
        out: list[ColumnHeader] = []
        for child in self.children:
            out.extend(child.leaves())
        return out

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"header": self.header}
        if self.key is not None:
            d["key"] = self.key
        if self.children:
            d["children"] = [c.to_dict() for c in self.children]
        return d


@dataclass(frozen=True)
class LeafRow:
    """A row of cells. row_header is the path of labels (e.g. ("x", "Group 1"))."""
    row_header: tuple[str, ...]
    cells: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"rowHeader": list(self.row_header)}
        for key, value in self.cells.items():
            d[key] = _cell_value(value)
        return d


@dataclass(frozen=True)
class GroupRow:
    """A labelled group of nested rows."""
    row_header: tuple[str, ...]
    children: tuple[Row, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "rowHeader": list(self.row_header),
            "children": [c.to_dict() for c in self.children],
        }


Row = Union[LeafRow, GroupRow]


@dataclass(frozen=True)
class Table:
    """
    A self-contained result table.

    Attributes:
        title: Table caption
        column_headers: Top-level header nodes, left to right
        rows: Body rows in display order
        footnotes: Free-text notes shown under the table
    """
    title: str
    column_headers: tuple[ColumnHeader, ...]
    rows: tuple[Row, ...] = ()
    footnotes: tuple[str, ...] = ()

    @property
    def leaf_keys(self) -> list[str]:
        return [leaf.cell_key for h in self.column_headers for leaf in h.leaves()]

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "title": self.title,
            "columnHeaders": [h.to_dict() for h in self.column_headers],
            "rows": [r.to_dict() for r in self.rows],
        }
        if self.footnotes:
            d["footnotes"] = list(self.footnotes)
        return d


def headers(*names: str) -> tuple[ColumnHeader, ...]:
    """Shorthand for a flat header row."""
    return tuple(ColumnHeader(n) for n in names)


def _cell_value(value: Any) -> Any:
    # Plain Python scalars only; numpy scalars do not serialize.
    if isinstance(value, np.generic):
        return value.item()
    return value
