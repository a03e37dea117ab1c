"""Pytest configuration and shared fixtures."""

import logging

import laspy
import numpy as np
import pytest

TRANSLATION_ROWS = [
    "1 0 0 10",
    "0 1 0 20",
    "0 0 1 30",
    "0 0 0 1",
]


def make_header(scales=(0.01, 0.01, 0.01), offsets=(0.0, 0.0, 0.0), point_format=3):
    header = laspy.LasHeader(point_format=point_format, version="1.2")
    header.scales = np.array(scales, dtype=np.float64)
    header.offsets = np.array(offsets, dtype=np.float64)
    return header


def make_points(xyz, header):
    xyz = np.asarray(xyz, dtype=np.float64).reshape(-1, 3)
    points = laspy.ScaleAwarePointRecord.zeros(len(xyz), header=header)
    if len(xyz):
        points.x = xyz[:, 0]
        points.y = xyz[:, 1]
        points.z = xyz[:, 2]
        points.intensity = np.arange(len(xyz), dtype=np.uint16) + 100
        points.return_number = np.ones(len(xyz), dtype=np.uint8)
        points.number_of_returns = np.ones(len(xyz), dtype=np.uint8)
        if "red" in header.point_format.dimension_names:
            points.red = np.full(len(xyz), 1000, dtype=np.uint16)
            points.green = np.full(len(xyz), 2000, dtype=np.uint16)
            points.blue = np.full(len(xyz), 3000, dtype=np.uint16)
    return points


@pytest.fixture
def write_las(tmp_path):
    """Fixture writing a LAS file holding the given coordinates."""

    def _write(xyz, name="input.las", **header_kwargs):
        header = make_header(**header_kwargs)
        las = laspy.LasData(header=header, points=make_points(xyz, header))
        path = tmp_path / name
        las.write(str(path))
        return path

    return _write


@pytest.fixture
def write_transform(tmp_path):
    """Fixture writing a transformation matrix text file."""

    def _write(lines, name="trans.txt"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write


@pytest.fixture
def translation_txt(write_transform):
    return write_transform(TRANSLATION_ROWS)


@pytest.fixture
def make_record():
    """Fixture building an in-memory point record and its header."""

    def _make(xyz, **header_kwargs):
        header = make_header(**header_kwargs)
        return make_points(xyz, header), header

    return _make


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the root logger changes made by the command line entry point."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
