from __future__ import annotations

from typing import List

from .models import ScheduledSlice


class TimelineBuilder:
    """
    Accumulates CPU-occupancy slices in chronological order.

    A slice that starts exactly where the previous one ended and belongs to
    the same process is folded into it, so the finished timeline never has
    two adjacent entries for one pid. Gaps (idle CPU) are kept as gaps.
    """

    def __init__(self) -> None:
        self._slices: List[ScheduledSlice] = []

    def append(self, pid: int, start_time: int, end_time: int) -> None:
        if end_time <= start_time:
            return

        if self._slices:
            last = self._slices[-1]
            if start_time < last.end_time:
                raise ValueError(
                    f"slice for pid {pid} at {start_time} overlaps previous slice ending at {last.end_time}"
                )
            if last.pid == pid and last.end_time == start_time:
                last.end_time = end_time
                return

        self._slices.append(ScheduledSlice(pid=pid, start_time=start_time, end_time=end_time))

    @property
    def end_time(self) -> int:
        return self._slices[-1].end_time if self._slices else 0

    def __len__(self) -> int:
        return len(self._slices)

    def build(self) -> List[ScheduledSlice]:
        return [ScheduledSlice(s.pid, s.start_time, s.end_time) for s in self._slices]
