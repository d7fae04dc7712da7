from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .models import ScheduledSlice

PALETTE = ["red", "green", "yellow", "blue", "magenta", "cyan"]
PREEMPT_MARK = "*"


def label(pid: int) -> str:
    return f"P{pid}"


@dataclass(frozen=True)
class GanttCell:
    """
    One box of a Gantt chart: a timeline entry, or an idle stretch
    (``pid is None``). ``preempted`` means the process loses the CPU at
    ``end`` and runs again later.
    """

    pid: Optional[int]
    start: int
    end: int
    preempted: bool = False

    @property
    def idle(self) -> bool:
        return self.pid is None

    @property
    def text(self) -> str:
        if self.idle:
            return "idle"
        return label(self.pid) + (PREEMPT_MARK if self.preempted else "")

    @property
    def width(self) -> int:
        # Room for the label plus one space each side, or one column per unit.
        return max(len(self.text) + 2, self.end - self.start)


def gantt_cells(slices: Sequence[ScheduledSlice]) -> Iterator[GanttCell]:
    """
    Walk an ordered timeline from t=0, yielding idle cells for gaps.
    """
    last_index = {sl.pid: idx for idx, sl in enumerate(slices)}
    clock = 0
    for idx, sl in enumerate(slices):
        if sl.start_time > clock:
            yield GanttCell(None, clock, sl.start_time)
        yield GanttCell(sl.pid, sl.start_time, sl.end_time, preempted=last_index[sl.pid] != idx)
        clock = sl.end_time


def _time_axis(cells: List[GanttCell]) -> str:
    """Boundary times, each printed under the ``|`` that closes its cell."""
    axis = str(cells[0].start)
    column = 0
    for cell in cells:
        column += cell.width + 1
        axis = axis.ljust(column) if len(axis) < column else axis + " "
        axis += str(cell.end)
    return axis


def _footnote(cells: List[GanttCell]) -> str:
    if any(cell.preempted for cell in cells):
        return f"{PREEMPT_MARK} = preempted"
    return ""


def render_gantt(slices: Sequence[ScheduledSlice]) -> str:
    """
    Plain-text chart: one ``|``-delimited box per entry or idle gap, with the
    boundary times underneath.
    """
    cells = list(gantt_cells(slices))
    if not cells:
        return "(no execution)"

    bar = "|" + "".join(cell.text.center(cell.width) + "|" for cell in cells)
    lines = ["Gantt chart", bar, _time_axis(cells)]
    note = _footnote(cells)
    if note:
        lines.append(note)
    return "\n".join(lines)


def _cell_style(cell: GanttCell) -> str:
    if cell.idle:
        return "dim italic"
    return f"bold white on {PALETTE[cell.pid % len(PALETTE)]}"


def build_rich_gantt(slices: Sequence[ScheduledSlice]) -> Panel:
    """
    Colored chart in a Panel. Each process keeps one color across the chart;
    idle stretches are drawn unshaded.
    """
    cells = list(gantt_cells(slices))
    if not cells:
        return Panel("No execution", title="Gantt chart", expand=False)

    bar = Text("|")
    for cell in cells:
        bar.append(cell.text.center(cell.width), style=_cell_style(cell))
        bar.append("|")

    axis = Text(_time_axis(cells), style="dim")
    note = _footnote(cells)
    return Panel(
        Group(bar, axis),
        title="Gantt chart",
        subtitle=note or None,
        expand=False,
    )
