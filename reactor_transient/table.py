"""
Time-Series Input Table

Holds the externally imposed reactivity rho(t) and external source S(t) of a
transient as a sparse table of breakpoints, and answers point queries on it.

Values are held constant between breakpoints (zero-order hold, taken from the
left end of each interval). Slopes are estimated from neighbouring rows with a
forward difference on the first interval, a centered difference on interior
intervals and a backward difference past the last breakpoint. This estimator
degrades when breakpoints are far apart; it is kept as is because the
numerical output of existing input decks depends on it.

Intervals are half-open, [time_i, time_i+1): a query exactly on a breakpoint
belongs to the interval starting there.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from reactor_transient.exceptions import InvalidTableError, OutOfRangeError

logger = logging.getLogger(__name__)


class TableField(Enum):
    """Quantities tabulated against time"""
    REACTIVITY = "reactivity"  # absolute Δk/k
    SOURCE = "source"  # neutrons/s

    @property
    def column(self) -> int:
        return _COLUMNS[self]


_COLUMNS = {TableField.REACTIVITY: 1, TableField.SOURCE: 2}

FieldLike = Union[TableField, str]


@dataclass(frozen=True)
class TableSample:
    """All point quantities of a table at one time"""
    time: float
    reactivity: float
    reactivity_slope: float
    source: float
    source_slope: float
    time_to_next_breakpoint: Optional[float]  # None at or after the last breakpoint


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class TimeSeriesTable:
    """Immutable (time, reactivity, source) table with step interpolation.

    Example:
        >>> table = TimeSeriesTable.build([(0, 0.0, 0.0), (10, 0.5, 100.0), (20, 0.5, 100.0)])
        >>> table.value_at('reactivity', 5)
        0.0
        >>> table.slope_at('reactivity', 5)
        0.05
    """

    def __init__(self, records):
        """Validate and store the table rows.

        Args:
            records: Array-like of shape (n, 3) holding (time, reactivity, source)
                rows with strictly increasing time

        Raises:
            InvalidTableError: If the rows cannot form a valid table
        """
        try:
            data = np.array(records, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidTableError(f"Table rows must be numeric triples: {e}")

        if data.ndim != 2 or data.shape[1] != 3:
            raise InvalidTableError(
                f"Table rows must be (time, reactivity, source) triples, got shape {data.shape}"
            )
        if data.shape[0] < 2:
            raise InvalidTableError(
                f"Table needs at least 2 rows for interpolation, got {data.shape[0]}"
            )
        if not np.all(np.isfinite(data)):
            raise InvalidTableError("Table contains non-finite values")

        steps = np.diff(data[:, 0])
        if np.any(steps <= 0.0):
            bad = int(np.argmax(steps <= 0.0))
            raise InvalidTableError(
                f"Times must be strictly increasing: row {bad + 1} has time "
                f"{data[bad + 1, 0]} after {data[bad, 0]}"
            )

        data.flags.writeable = False
        self._data = data
        self._times = data[:, 0]

        logger.debug(
            f"Built time-series table: {len(self)} rows, t = [{self.start_time()}, {self.end_time()}]"
        )

    @classmethod
    def build(cls, rows: Iterable[Sequence[float]]) -> "TimeSeriesTable":
        """Build a table from an ordered sequence of (time, reactivity, source) rows."""
        return cls(list(rows))

    # ------------------------------------------------------------------
    # Read-only access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self._data.shape[0]

    def __repr__(self) -> str:
        return (f"TimeSeriesTable(rows={len(self)}, start={self.start_time()}, "
                f"end={self.end_time()})")

    @property
    def records(self) -> np.ndarray:
        return _read_only(self._data)

    @property
    def times(self) -> np.ndarray:
        return _read_only(self._times)

    @property
    def reactivity(self) -> np.ndarray:
        return _read_only(self._data[:, 1])

    @property
    def source(self) -> np.ndarray:
        return _read_only(self._data[:, 2])

    def start_time(self) -> float:
        return float(self._times[0])

    def end_time(self) -> float:
        return float(self._times[-1])

    def contains(self, t: float) -> bool:
        """True if t lies within [start_time, end_time]."""
        return self.start_time() <= t <= self.end_time()

    # ------------------------------------------------------------------
    # Point queries
    # ------------------------------------------------------------------

    def _column(self, field: FieldLike) -> np.ndarray:
        try:
            field = TableField(field)
        except ValueError:
            raise ValueError(
                f"Unknown table field {field!r}; expected one of "
                f"{[f.value for f in TableField]}"
            )
        return self._data[:, field.column]

    def _interval(self, t: float) -> int:
        """Index i of the interval [time_i, time_i+1) holding t.

        Returns len(self) - 1 for t at or after the last breakpoint.

        Raises:
            OutOfRangeError: If t is before the first breakpoint
        """
        i = int(np.searchsorted(self._times, t, side="right")) - 1
        if i < 0:
            raise OutOfRangeError(t, self.start_time(), self.end_time(),
                                  f"Time {t} is before the first breakpoint {self.start_time()}")
        return i

    def value_at(self, field: FieldLike, t: float) -> float:
        """Value of a field at time t (zero-order hold).

        Args:
            field: 'reactivity' or 'source'
            t: Query time in seconds

        Returns:
            Value at the left end of the interval holding t, or the last
            tabulated value at or beyond the last breakpoint

        Raises:
            OutOfRangeError: If t is before the first breakpoint
        """
        column = self._column(field)
        i = self._interval(t)
        return float(column[i])

    def slope_at(self, field: FieldLike, t: float) -> float:
        """Time derivative of a field at time t.

        Forward difference on the first interval, centered difference over the
        neighbouring rows on interior intervals, backward difference over the
        last two rows at or beyond the last breakpoint.

        Raises:
            OutOfRangeError: If t is before the first breakpoint
        """
        column = self._column(field)
        times = self._times
        i = self._interval(t)
        last = len(self) - 1

        if i >= last:
            lo, hi = last - 1, last
        elif i == 0:
            lo, hi = 0, 1
        else:
            lo, hi = i - 1, i + 1

        return float((column[hi] - column[lo]) / (times[hi] - times[lo]))

    def distance_to_next_breakpoint(self, t: float) -> float:
        """Time from t to the next breakpoint after it.

        Raises:
            OutOfRangeError: If t is before the first breakpoint, or at or after
                the last one (there is no next breakpoint)
        """
        i = self._interval(t)
        if i >= len(self) - 1:
            raise OutOfRangeError(t, self.start_time(), self.end_time(),
                                  f"No breakpoint after time {t}; table ends at {self.end_time()}")
        return float(self._times[i + 1] - t)

    # Per-quantity accessors

    def reactivity_at(self, t: float) -> float:
        return self.value_at(TableField.REACTIVITY, t)

    def reactivity_slope_at(self, t: float) -> float:
        return self.slope_at(TableField.REACTIVITY, t)

    def source_at(self, t: float) -> float:
        return self.value_at(TableField.SOURCE, t)

    def source_slope_at(self, t: float) -> float:
        return self.slope_at(TableField.SOURCE, t)

    def sample(self, t: float) -> TableSample:
        """Evaluate every point query at time t.

        Raises:
            OutOfRangeError: If t is before the first breakpoint
        """
        if t >= self.end_time():
            remaining = None
        else:
            remaining = self.distance_to_next_breakpoint(t)

        return TableSample(
            time=float(t),
            reactivity=self.reactivity_at(t),
            reactivity_slope=self.reactivity_slope_at(t),
            source=self.source_at(t),
            source_slope=self.source_slope_at(t),
            time_to_next_breakpoint=remaining,
        )
