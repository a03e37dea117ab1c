import logging

import numpy as np

from lastransform.errors import TransformFileError

logger = logging.getLogger(__name__)

# Lines starting with these characters carry metadata, not matrix rows
SKIPPED_PREFIXES = ("V", "M")
AFFINE_BOTTOM_ROW = np.array([0.0, 0.0, 0.0, 1.0])


class TransformMatrix:
    """Read-only 4x4 homogeneous affine transform, row-major."""

    def __init__(self, rows):
        values = np.array(rows, dtype=np.float64)
        if values.shape != (4, 4):
            raise ValueError(f"expected a 4x4 matrix, got shape {values.shape}")
        values.setflags(write=False)
        self._values = values

    @classmethod
    def identity(cls):
        return cls(np.eye(4))

    @property
    def values(self):
        return self._values

    @property
    def linear(self):
        return self._values[:3, :3]

    @property
    def translation(self):
        return self._values[:3, 3]

    def __eq__(self, other):
        if not isinstance(other, TransformMatrix):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    def __repr__(self):
        return f"TransformMatrix({self._values.tolist()})"


# Parse the rows of a transformation text file
def read_matrix_rows(txt_path):
    try:
        with open(txt_path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise TransformFileError(txt_path, "unreadable", str(e)) from e

    rows = []
    for line_number, line in enumerate(lines, start=1):
        if line.startswith(SKIPPED_PREFIXES) or not line.strip():
            continue
        try:
            rows.append([float(val) for val in line.split()])
        except ValueError as e:
            raise TransformFileError(txt_path, "parse", f"line {line_number}: {e}") from e
    return rows


def load_transformation_matrix(txt_path):
    rows = read_matrix_rows(txt_path)
    if not rows:
        raise TransformFileError(txt_path, "empty", "no matrix rows found")

    widths = sorted({len(row) for row in rows})
    if len(rows) != 4 or widths != [4]:
        raise TransformFileError(
            txt_path, "shape",
            f"expected 4 rows of 4 values, got {len(rows)} rows with {widths} values"
        )

    matrix = TransformMatrix(rows)
    if not np.all(np.isfinite(matrix.values)):
        raise TransformFileError(txt_path, "parse", "matrix entries must be finite numbers")
    if not np.allclose(matrix.values[3], AFFINE_BOTTOM_ROW):
        raise TransformFileError(
            txt_path, "affine", f"last row must be 0 0 0 1, got {matrix.values[3].tolist()}"
        )

    logger.info("read trans =\n%s", "\n".join(" ".join(f"{v:g}" for v in row) for row in matrix.values))
    return matrix


# Apply the 3x3 linear part plus the translation column to one coordinate
def transform_point(matrix, coordinate):
    values = matrix.values
    x, y, z = coordinate
    return tuple(
        float(values[i, 0] * x + values[i, 1] * y + values[i, 2] * z + values[i, 3])
        for i in range(3)
    )
