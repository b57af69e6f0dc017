"""
Adapters exposing transport process solutions as indexed global vectors

The coupling only ever calls ``get(global_id)`` and ``set(global_id, value)``
on a process solution, so any object with those two methods works. This
module wraps numpy arrays for callers whose transport solver keeps its
solution in plain arrays.
"""

from typing import Sequence

import numpy as np


class ArrayGlobalVector:
    """Indexed get/set view on a 1-D numpy array (no copy)"""

    def __init__(self, values: np.ndarray):
        values = np.asarray(values)
        if values.ndim != 1:
            raise ValueError(f"Global vector must be one-dimensional, got shape {values.shape}")
        if not np.issubdtype(values.dtype, np.floating):
            raise TypeError(f"Global vector must hold floating-point values, got {values.dtype}")
        self.values = values

    def get(self, global_id: int) -> float:
        return float(self.values[global_id])

    def set(self, global_id: int, value: float) -> None:
        self.values[global_id] = value

    def __len__(self) -> int:
        return self.values.shape[0]


def wrap_process_solutions(arrays: Sequence[np.ndarray]) -> list:
    """Wrap one array per transport process."""
    return [ArrayGlobalVector(a) for a in arrays]
