"""Apply 4x4 affine transforms to LAS/LAZ point clouds, one point at a time."""

from lastransform.errors import (
    ConfigError,
    LasTransformError,
    QuantizationError,
    SinkOpenError,
    SourceOpenError,
    StreamIOError,
    TransformFileError,
)
from lastransform.inventory import Inventory
from lastransform.las_io import LasPointSink, LasPointSource
from lastransform.matrix import TransformMatrix, load_transformation_matrix, transform_point
from lastransform.pipeline import TransformReport, finalize_header, run_transform, transform_stream
from lastransform.points import Point, Quantizer

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "Inventory",
    "LasPointSink",
    "LasPointSource",
    "LasTransformError",
    "Point",
    "QuantizationError",
    "Quantizer",
    "SinkOpenError",
    "SourceOpenError",
    "StreamIOError",
    "TransformFileError",
    "TransformMatrix",
    "TransformReport",
    "finalize_header",
    "load_transformation_matrix",
    "run_transform",
    "transform_point",
    "transform_stream",
]
