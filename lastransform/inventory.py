import numpy as np

from lastransform.points import INT32_MAX, INT32_MIN

MAX_RETURNS = 15


class Inventory:
    """Running statistics over the points written to a sink."""

    def __init__(self):
        self.count = 0
        self.points_by_return = np.zeros(MAX_RETURNS, dtype=np.uint64)
        self.min_raw = [INT32_MAX, INT32_MAX, INT32_MAX]
        self.max_raw = [INT32_MIN, INT32_MIN, INT32_MIN]

    def add(self, point):
        raws = (point.X, point.Y, point.Z)
        for axis, raw in enumerate(raws):
            if raw < self.min_raw[axis]:
                self.min_raw[axis] = raw
            if raw > self.max_raw[axis]:
                self.max_raw[axis] = raw

        # return numbers outside 1..15 are not counted
        if point.has("return_number"):
            return_number = int(point["return_number"])
            if 1 <= return_number <= MAX_RETURNS:
                self.points_by_return[return_number - 1] += 1
        self.count += 1

    # Real-valued (mins, maxs) of everything added, or None when empty
    def bounds(self, quantizer):
        if self.count == 0:
            return None
        mins = tuple(quantizer.dequantize(self.min_raw[axis], axis) for axis in range(3))
        maxs = tuple(quantizer.dequantize(self.max_raw[axis], axis) for axis in range(3))
        return mins, maxs
