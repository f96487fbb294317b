from __future__ import annotations

import html
from dataclasses import dataclass
from typing import List, Sequence, Union

from ..infra.contracts import ActionsIO


@dataclass(frozen=True)
class SummaryCell:
    data: str
    header: bool = False


Cell = Union[str, SummaryCell]


def _wrap(tag: str, content: str) -> str:
    return f"<{tag}>{content}</{tag}>"


class JobSummary:
    """Buffer for the job summary page; flushed once with write()."""

    def __init__(self) -> None:
        self._parts: List[str] = []

    def add_heading(self, text: str, level: int = 1) -> "JobSummary":
        lvl = level if 1 <= int(level) <= 6 else 1
        self._parts.append(_wrap(f"h{lvl}", html.escape(str(text))) + "\n")
        return self

    def add_table(self, rows: Sequence[Sequence[Cell]]) -> "JobSummary":
        body = []
        for row in rows:
            cells = []
            for c in row:
                cell = c if isinstance(c, SummaryCell) else SummaryCell(data=str(c))
                cells.append(_wrap("th" if cell.header else "td", html.escape(cell.data)))
            body.append(_wrap("tr", "".join(cells)))
        self._parts.append(_wrap("table", "".join(body)) + "\n")
        return self

    def stringify(self) -> str:
        return "".join(self._parts)

    def is_empty(self) -> bool:
        return not self._parts

    def write(self, io: ActionsIO) -> None:
        if self.is_empty():
            return
        io.append_summary(self.stringify())
        self._parts = []
