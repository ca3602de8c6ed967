import math
from typing import Iterable, List, Optional
import numpy as np

AXIS_COUNT = 6


class _JointPosition:
    """Fixed size vector of six axis values."""

    _default_value: Optional[float] = 0.0

    def __init__(self, *values):
        # Accept JointPosition(1, 2, 3) as well as JointPosition([1, 2, 3])
        if len(values) == 1 and isinstance(values[0], (list, tuple, np.ndarray, _JointPosition)):
            values = list(values[0])
        self._values = self._check_axis_values(values)

    def _check_axis_values(self, values: Iterable) -> List[Optional[float]]:
        values = list(values)
        if len(values) > AXIS_COUNT:
            raise ValueError(f"A joint position holds at most {AXIS_COUNT} values, got {len(values)}.")
        result = [None if v is None else float(v) for v in values]
        result += [self._default_value] * (AXIS_COUNT - len(result))
        return result

    def duplicate(self):
        return type(self)(list(self._values))

    def reset(self) -> None:
        self._values = [self._default_value] * AXIS_COUNT

    def to_list(self) -> List[Optional[float]]:
        return list(self._values)

    def to_array(self) -> np.ndarray:
        """Return the values as a NumPy array; undefined values become nan."""
        return np.array([np.nan if v is None else v for v in self._values], dtype=np.float64)

    @property
    def is_valid(self) -> bool:
        return len(self._values) == AXIS_COUNT and all(
            v is None or math.isfinite(v) for v in self._values)

    def __getitem__(self, index: int) -> Optional[float]:
        return self._values[index]

    def __setitem__(self, index: int, value: Optional[float]) -> None:
        self._values[index] = None if value is None else float(value)

    def __len__(self) -> int:
        return AXIS_COUNT

    def __iter__(self):
        return iter(self._values)

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        values = ", ".join("None" if v is None else f"{v:.2f}" for v in self._values)
        return f"{type(self).__name__}({values})"


class RobotJointPosition(_JointPosition):
    """Joint angles of the six robot axes in degrees."""

    _default_value = 0.0

    def _check_axis_values(self, values: Iterable) -> List[Optional[float]]:
        result = super()._check_axis_values(values)
        if any(v is None or not math.isfinite(v) for v in result):
            raise ValueError("Robot joint values must be finite numbers.")
        return result

    def to_radians(self) -> np.ndarray:
        return np.radians(self.to_array())


class ExternalJointPosition(_JointPosition):
    """
    Positions of up to six external axes (logic axes a to f), in degrees for
    rotational axes and millimeters for linear axes.
    A value of None means the axis is not connected.
    """

    _default_value = None

    @property
    def defined_count(self) -> int:
        return sum(v is not None for v in self._values)
