import numpy as np
import pytest

from ringqueue.slab import Slab


def test_allocate_fills_every_cell() -> None:
    """Tests that a new slab holds the fill value everywhere."""
    slab = Slab.allocate(5, fill=-3)
    assert len(slab) == 5
    assert slab.view().tolist() == [-3] * 5
    assert not slab.released


def test_allocate_empty_slab() -> None:
    """Tests that zero-length slabs are allowed."""
    slab = Slab.allocate(0, fill=1)
    assert len(slab) == 0
    assert slab.take_wrapped(0, 0).size == 0


def test_allocate_negative_length() -> None:
    """Tests that a negative length is rejected."""
    with pytest.raises(ValueError, match="non-negative"):
        Slab.allocate(-1, fill=0)


def test_item_access() -> None:
    """Tests reading and writing single cells."""
    slab = Slab.allocate(3, fill=0)
    slab[1] = 42
    assert slab[1] == 42
    assert isinstance(slab[1], int)
    with pytest.raises(IndexError):
        _ = slab[3]


def test_take_wrapped_copies_across_the_end() -> None:
    """Tests copying a run of cells that wraps back to index 0."""
    slab = Slab.allocate(4, fill=0)
    slab.store(0, [10, 20, 30, 40])

    taken = slab.take_wrapped(2, 3)
    assert taken.tolist() == [30, 40, 10]

    # The copy is independent of the slab.
    taken[0] = 99
    assert slab[2] == 30


def test_store_writes_a_contiguous_run() -> None:
    """Tests writing several values at an offset."""
    slab = Slab.allocate(5, fill=0)
    slab.store(1, np.array([7, 8]))
    assert slab.view().tolist() == [0, 7, 8, 0, 0]


def test_view_is_read_only() -> None:
    """Tests that the view cannot be used to modify the cells."""
    slab = Slab.allocate(2, fill=0)
    view = slab.view()
    with pytest.raises(ValueError):
        view[0] = 1
    slab[0] = 5
    assert view[0] == 5


def test_release() -> None:
    """Tests that a released slab is empty and refuses element access."""
    slab = Slab.allocate(3, fill=0)
    slab.release()

    assert slab.released
    assert len(slab) == 0
    assert repr(slab) == "Slab(released)"
    with pytest.raises(ValueError, match="released"):
        _ = slab[0]
    with pytest.raises(ValueError, match="released"):
        slab.view()
