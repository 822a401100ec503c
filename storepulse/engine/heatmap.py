"""
Heatmap Builder - weekday x hour activity grids.

Rows are weekdays (0=Sunday .. 6=Saturday), columns are hours 0-23 in the
configured zone. Cells hold raw counts (attendance, check-ins only) or raw
sums of sales totals; scaling is left to the consumer.
"""

from typing import Sequence

import numpy as np

from storepulse.models.dashboard import HEATMAP_COLUMNS, HEATMAP_ROWS
from storepulse.models.events import AttendanceRecord, SalesRecord


class HeatmapBuilder:
    """Builds fixed 7 x 24 grids from normalized records."""

    @staticmethod
    def empty(dtype=np.float64) -> np.ndarray:
        return np.zeros((HEATMAP_ROWS, HEATMAP_COLUMNS), dtype=dtype)

    def attendance(self, records: Sequence[AttendanceRecord]) -> list[list[int]]:
        """Count check-in events per (weekday, hour)."""
        grid = self.empty(np.int64)
        for record in records:
            if record.is_check_in:
                grid[record.weekday, record.hour_of_day] += 1
        return grid.tolist()

    def sales(self, records: Sequence[SalesRecord]) -> list[list[float]]:
        """Sum sales totals per (weekday, hour)."""
        grid = self.empty()
        for record in records:
            grid[record.weekday, record.hour_of_day] += record.total
        return grid.tolist()
