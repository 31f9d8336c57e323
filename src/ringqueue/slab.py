from typing import Final

import numpy as np
import numpy.typing as npt

# --- Constants ---

# Every slot holds one signed 64-bit integer.
CELL_DTYPE: Final = np.int64


class Slab:
    """A fixed-length, contiguous block of integer cells owned by one queue.

    The slab never grows or shrinks in place. Resizing a queue means
    allocating a new slab, copying the live cells over and releasing the old
    one, so a failed allocation can never leave a half-populated block behind.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: npt.NDArray[np.int64]) -> None:
        self._cells: npt.NDArray[np.int64] | None = cells

    @classmethod
    def allocate(cls, length: int, fill: int) -> "Slab":
        """Allocates a new slab with every cell set to `fill`.

        Args:
            length: Number of cells. Zero is allowed.
            fill: The value written into every cell.

        Raises:
            ValueError: If `length` is negative.
            MemoryError: If the storage cannot be obtained.
        """
        if length < 0:
            err_msg = f"Slab length must be non-negative, got {length}."
            raise ValueError(err_msg)
        return cls(np.full(length, fill, dtype=CELL_DTYPE))

    @property
    def released(self) -> bool:
        return self._cells is None

    def release(self) -> None:
        """Drops the cells. The slab is unusable afterwards."""
        self._cells = None

    def view(self) -> npt.NDArray[np.int64]:
        """Returns a read-only view of every cell."""
        cells = self._require_cells().view()
        cells.flags.writeable = False
        return cells

    def take_wrapped(self, start: int, count: int) -> npt.NDArray[np.int64]:
        """Copies `count` cells starting at `start`, wrapping past the end."""
        cells = self._require_cells()
        if count == 0:
            return np.empty(0, dtype=CELL_DTYPE)
        indices = (start + np.arange(count)) % len(cells)
        return cells[indices]

    def store(self, offset: int, values: npt.ArrayLike) -> None:
        """Writes `values` contiguously starting at `offset`."""
        values = np.asarray(values, dtype=CELL_DTYPE)
        self._require_cells()[offset : offset + len(values)] = values

    def _require_cells(self) -> npt.NDArray[np.int64]:
        if self._cells is None:
            err_msg = "Slab has been released."
            raise ValueError(err_msg)
        return self._cells

    def __len__(self) -> int:
        return 0 if self._cells is None else len(self._cells)

    def __getitem__(self, index: int) -> int:
        return int(self._require_cells()[index])

    def __setitem__(self, index: int, value: int) -> None:
        self._require_cells()[index] = value

    def __repr__(self) -> str:
        if self._cells is None:
            return "Slab(released)"
        return f"Slab(length={len(self._cells)})"
