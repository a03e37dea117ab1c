"""Point records with coupled real and quantized coordinates.

LAS files store coordinates as signed 32-bit integers. The real value of an
axis is ``raw * scale + offset``; writing a real value stores the nearest
integer for the same scale and offset.
"""

import math

import numpy as np

from lastransform.errors import QuantizationError

AXES = ("X", "Y", "Z")
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class Quantizer:
    def __init__(self, scales, offsets):
        self.scales = tuple(float(s) for s in scales)
        self.offsets = tuple(float(o) for o in offsets)
        if len(self.scales) != 3 or len(self.offsets) != 3:
            raise ValueError("a quantizer needs one scale and one offset per axis")
        if any(s == 0.0 for s in self.scales):
            raise ValueError(f"scale factors must be non-zero, got {self.scales}")

    @classmethod
    def from_header(cls, header):
        return cls(header.scales, header.offsets)

    def quantize(self, value, axis):
        scaled = (value - self.offsets[axis]) / self.scales[axis]
        if not math.isfinite(scaled):
            raise QuantizationError(f"cannot quantize {value!r} on axis {AXES[axis]}")
        # round half away from zero
        raw = math.floor(scaled + 0.5) if scaled >= 0 else math.ceil(scaled - 0.5)
        if not INT32_MIN <= raw <= INT32_MAX:
            raise QuantizationError(
                f"{AXES[axis].lower()}={value!r} does not fit in 32 bits with "
                f"scale {self.scales[axis]} and offset {self.offsets[axis]}"
            )
        return raw

    def dequantize(self, raw, axis):
        return raw * self.scales[axis] + self.offsets[axis]

    def __eq__(self, other):
        if not isinstance(other, Quantizer):
            return NotImplemented
        return self.scales == other.scales and self.offsets == other.offsets

    def __repr__(self):
        return f"Quantizer(scales={self.scales}, offsets={self.offsets})"


class Point:
    """One record inside a laspy point record chunk.

    The point does not own its storage: it reads and writes the chunk in
    place and is only valid until the source moves to the next chunk.
    """

    __slots__ = ("_record", "_index", "quantizer")

    def __init__(self, record, index, quantizer):
        self._record = record
        self._index = index
        self.quantizer = quantizer

    def _get_raw(self, axis):
        return int(self._record.array[AXES[axis]][self._index])

    def _set_raw(self, axis, value):
        value = int(value)
        if not INT32_MIN <= value <= INT32_MAX:
            raise QuantizationError(f"{AXES[axis]}={value} does not fit in 32 bits")
        self._record.array[AXES[axis]][self._index] = value

    def _get_real(self, axis):
        return self.quantizer.dequantize(self._get_raw(axis), axis)

    def _set_real(self, axis, value):
        self._record.array[AXES[axis]][self._index] = self.quantizer.quantize(value, axis)

    X = property(lambda self: self._get_raw(0), lambda self, v: self._set_raw(0, v))
    Y = property(lambda self: self._get_raw(1), lambda self, v: self._set_raw(1, v))
    Z = property(lambda self: self._get_raw(2), lambda self, v: self._set_raw(2, v))
    x = property(lambda self: self._get_real(0), lambda self, v: self._set_real(0, v))
    y = property(lambda self: self._get_real(1), lambda self, v: self._set_real(1, v))
    z = property(lambda self: self._get_real(2), lambda self, v: self._set_real(2, v))

    @property
    def xyz(self):
        return self.x, self.y, self.z

    @xyz.setter
    def xyz(self, coordinate):
        # quantize every axis before storing any of them
        raws = [self.quantizer.quantize(value, axis) for axis, value in enumerate(coordinate)]
        for axis, raw in enumerate(raws):
            self._record.array[AXES[axis]][self._index] = raw

    @property
    def raw(self):
        return self._record.array[self._index]

    @property
    def dimension_names(self):
        return tuple(self._record.point_format.dimension_names)

    def has(self, name):
        return name in self.dimension_names

    # Ancillary attributes are read-only
    def __getitem__(self, name):
        if name in AXES or name in ("x", "y", "z"):
            return getattr(self, name)
        if not self.has(name):
            raise KeyError(name)
        # slice then convert so packed bit fields unpack the same way as plain ones
        return np.asarray(self._record[name][self._index:self._index + 1])[0]

    def __repr__(self):
        return f"Point(X={self.X}, Y={self.Y}, Z={self.Z}, x={self.x:.6f}, y={self.y:.6f}, z={self.z:.6f})"
