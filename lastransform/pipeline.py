import logging
import time
from dataclasses import dataclass

from lastransform.errors import LasTransformError
from lastransform.matrix import load_transformation_matrix, transform_point

logger = logging.getLogger(__name__)

# Number of leading points echoed at debug level
ECHO_POINTS = 5


@dataclass(frozen=True)
class TransformReport:
    points: int
    bytes_written: int
    elapsed: float


def describe_point(index, point):
    quantizer = point.quantizer
    text = (
        f"After: {index}: X {point.X} Y {point.Y} Z {point.Z} "
        f"x {point.x:.6f} y {point.y:.6f} z {point.z:.6f}"
    )
    if point.has("red"):
        text += f" R {int(point['red'])} G {int(point['green'])} B {int(point['blue'])}"
    return text + f" z scale {quantizer.scales[2]:.6f} z offset {quantizer.offsets[2]:.6f}"


# Read, transform and write every point until the source runs dry
def transform_stream(matrix, source, sink):
    count = 0
    for point in iter(source.read_next, None):
        point.xyz = transform_point(matrix, point.xyz)
        sink.write(point)
        sink.update_inventory(point)
        if count < ECHO_POINTS and logger.isEnabledFor(logging.DEBUG):
            logger.debug(describe_point(count, point))
        count += 1
    return count


def finalize_header(source, sink):
    """Reconcile the output header with the inventory, then close the sink.

    Returns the total number of bytes written.
    """
    sink.finalize_header(source.header, recompute_bounds=True)
    return sink.close()


def run_transform(transform_path, source, sink):
    matrix = load_transformation_matrix(transform_path)
    start_time = time.perf_counter()

    source.open()
    try:
        sink.open(source.header)
        try:
            logger.info(
                "reading %d points from '%s' and writing them modified to '%s'.",
                source.point_count, source.name, sink.name
            )
            count = transform_stream(matrix, source, sink)
            total_bytes = finalize_header(source, sink)
        except BaseException:
            # keep whatever was written so far, without a reconciled header
            try:
                sink.close()
            except LasTransformError as close_error:
                logger.debug("closing '%s' after a failure also failed: %s", sink.name, close_error)
            raise
    finally:
        source.close()

    report = TransformReport(points=count, bytes_written=total_bytes, elapsed=time.perf_counter() - start_time)
    logger.info(
        "total time: %g sec %d bytes for %d points",
        report.elapsed, report.bytes_written, report.points
    )
    return report
