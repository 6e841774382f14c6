from __future__ import annotations

from typing import Any


_EDGE_ITEMS: int = 4


def configure(*, edge_items: int = 4) -> None:
    global _EDGE_ITEMS
    _EDGE_ITEMS = int(edge_items)


def _edge_indices(length: int) -> tuple[list[int], list[int], bool]:
    if length <= _EDGE_ITEMS * 2:
        return list(range(length)), [], False
    head = list(range(_EDGE_ITEMS))
    tail = list(range(length - _EDGE_ITEMS, length))
    return head, tail, True


def _format_value(value: Any) -> str:
    if hasattr(value, "item"):
        value = value.item()
    if isinstance(value, float):
        if value == 0.0:
            # Avoid printing "-0" for entries that cancelled out.
            return "0"
        return f"{value:g}"
    return str(value)


def _format_matrix_row(
    matrix: Any,
    row_index: int,
    col_head: list[int],
    col_tail: list[int],
    truncated: bool,
) -> str:
    entries: list[str] = []
    for col in col_head:
        entries.append(_format_value(matrix.get(row_index, col)))
    if truncated:
        entries.append("...")
    for col in col_tail:
        entries.append(_format_value(matrix.get(row_index, col)))
    return " ".join(entries)


def matrix_str(self: Any, *, extra: list[str] | None = None) -> str:
    rows = self.rows()
    cols = self.cols()

    info = [f"shape=({rows}, {cols})"]
    if extra:
        info.extend(extra)

    header = f"{self.__class__.__name__}({', '.join(info)})"

    row_head, row_tail, rows_truncated = _edge_indices(rows)
    col_head, col_tail, cols_truncated = _edge_indices(cols)

    lines = [header, "["]
    for row_index in row_head:
        row_repr = _format_matrix_row(self, row_index, col_head, col_tail, cols_truncated)
        lines.append(f" [{row_repr}]")
    if rows_truncated:
        lines.append(" ...")
    for row_index in row_tail:
        row_repr = _format_matrix_row(self, row_index, col_head, col_tail, cols_truncated)
        lines.append(f" [{row_repr}]")
    lines.append("]")
    return "\n".join(lines)


class MatrixMixin:
    def _format_info(self) -> list[str]:
        return []

    def __str__(self) -> str:
        return matrix_str(self, extra=self._format_info())

    def __repr__(self) -> str:
        shape = getattr(self, "shape", None)
        return f"<{self.__class__.__name__} shape={shape}>"
