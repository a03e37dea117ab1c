"""Tests for inventory accumulation."""

import numpy as np
import pytest

from lastransform.inventory import Inventory
from lastransform.points import Point, Quantizer


def test_empty_inventory_has_no_bounds():
    inventory = Inventory()
    assert inventory.count == 0
    assert inventory.bounds(Quantizer((1, 1, 1), (0, 0, 0))) is None


def test_inventory_tracks_count_and_bounds(make_record):
    xyz = [(1.0, -2.0, 3.0), (-4.0, 5.0, 0.5), (2.5, 0.0, -6.0)]
    record, header = make_record(xyz, offsets=(10.0, 0.0, 0.0))
    quantizer = Quantizer.from_header(header)

    inventory = Inventory()
    for index in range(len(xyz)):
        inventory.add(Point(record, index, quantizer))

    assert inventory.count == 3
    mins, maxs = inventory.bounds(quantizer)
    assert mins == pytest.approx((-4.0, -2.0, -6.0))
    assert maxs == pytest.approx((2.5, 5.0, 3.0))


def test_inventory_counts_points_by_return(make_record):
    record, header = make_record([(0.0, 0.0, 0.0)] * 4)
    record.number_of_returns = np.full(4, 3, dtype=np.uint8)
    record.return_number = np.array([1, 2, 2, 0], dtype=np.uint8)
    quantizer = Quantizer.from_header(header)

    inventory = Inventory()
    for index in range(4):
        inventory.add(Point(record, index, quantizer))

    assert inventory.count == 4
    assert inventory.points_by_return[:3].tolist() == [1, 2, 0]
    assert int(inventory.points_by_return.sum()) == 3
