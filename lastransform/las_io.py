"""laspy backed point source and sink.

Both read and write in fixed size chunks, so memory use does not depend on
the number of points in the file. ``-`` stands for standard input/output;
those streams are spooled through a temporary file because laspy needs to
seek.
"""

import copy
import io
import logging
import shutil
import sys
import tempfile
from pathlib import Path

import laspy
import numpy as np
from laspy import LaspyException

from lastransform.errors import SinkOpenError, SourceOpenError, StreamIOError
from lastransform.inventory import Inventory
from lastransform.points import Point, Quantizer

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 100_000
STDIO = "-"


def spool_stream(stream):
    spool = tempfile.TemporaryFile()
    shutil.copyfileobj(stream, spool)
    spool.seek(0)
    return spool


def display_name(path):
    return "stdin/stdout" if path == STDIO else str(path)


class LasPointSource:
    def __init__(self, path, chunk_size=DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.path = path
        self.chunk_size = chunk_size
        self.header = None
        self.quantizer = None
        self.points_read = 0
        self._spool = None
        self._reader = None
        self._chunks = None
        self._chunk = None
        self._index = 0

    @property
    def name(self):
        return display_name(self.path)

    def open(self):
        try:
            if self.path == STDIO:
                self._spool = spool_stream(sys.stdin.buffer)
                self._reader = laspy.open(self._spool, closefd=False)
            else:
                self._reader = laspy.open(self.path)
            self.header = self._reader.header
            self.quantizer = Quantizer.from_header(self.header)
        except (OSError, ValueError, LaspyException) as e:
            self.close()
            raise SourceOpenError(f"could not open lasreader for '{self.name}': {e}") from e
        self._chunks = self._reader.chunk_iterator(self.chunk_size)
        return self

    @property
    def point_count(self):
        return self.header.point_count

    @property
    def is_open(self):
        return self._reader is not None

    def read_next(self):
        """Return the next point, or None once the stream is exhausted."""
        if self._chunks is None:
            raise StreamIOError(f"'{self.name}' is not open")
        while self._chunk is None or self._index >= len(self._chunk):
            try:
                self._chunk = next(self._chunks)
            except StopIteration:
                return None
            except (OSError, ValueError, LaspyException) as e:
                raise StreamIOError(f"failed reading point {self.points_read} from '{self.name}': {e}") from e
            self._index = 0

        point = Point(self._chunk, self._index, self.quantizer)
        self._index += 1
        self.points_read += 1
        return point

    def close(self):
        self._chunks = None
        self._chunk = None
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        if self._spool is not None:
            self._spool.close()
            self._spool = None


class LasPointSink:
    def __init__(self, path, compress=None, chunk_size=DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if compress is None:
            compress = path != STDIO and Path(path).suffix.lower() == ".laz"
        self.path = path
        self.compress = compress
        self.chunk_size = chunk_size
        self.header = None
        self.quantizer = None
        self.inventory = Inventory()
        self.finalized = False
        self._dest = None
        self._writer = None
        self._buffer = None
        self._pending = 0

    @property
    def name(self):
        return display_name(self.path)

    def open(self, header_hint):
        try:
            if self.path == STDIO:
                self._dest = tempfile.TemporaryFile()
            else:
                self._dest = open(self.path, "wb")
            self._writer = laspy.open(
                self._dest, mode="w", header=copy.deepcopy(header_hint),
                do_compress=self.compress, closefd=False
            )
        except (OSError, ValueError, LaspyException) as e:
            if self._dest is not None:
                self._dest.close()
                self._dest = None
            raise SinkOpenError(f"could not open laswriter for '{self.name}': {e}") from e

        self.header = self._writer.header
        self.quantizer = Quantizer.from_header(self.header)
        self._buffer = laspy.ScaleAwarePointRecord.zeros(self.chunk_size, header=self.header)
        self._pending = 0
        return self

    def write(self, point):
        if point.quantizer != self.quantizer:
            raise StreamIOError(
                f"point quantized with {point.quantizer} cannot be written to a file using {self.quantizer}"
            )
        self._buffer.array[self._pending] = point.raw
        self._pending += 1
        if self._pending == self.chunk_size:
            self._flush()

    def update_inventory(self, point):
        self.inventory.add(point)

    def _flush(self):
        if not self._pending:
            return
        try:
            self._writer.write_points(self._buffer[:self._pending])
        except (OSError, ValueError, LaspyException) as e:
            raise StreamIOError(f"failed writing points to '{self.name}': {e}") from e
        logger.debug("flushed %d points to '%s'", self._pending, self.name)
        self._pending = 0

    def finalize_header(self, header, recompute_bounds=True):
        """Bring the output header in line with the points written so far.

        Point counts always come from the inventory. Bounds are recomputed
        from it when ``recompute_bounds`` is set, otherwise they are copied
        from ``header``.
        """
        self._flush()
        out = self.header
        out.point_count = self.inventory.count
        slots = len(out.number_of_points_by_return)
        out.number_of_points_by_return = self.inventory.points_by_return[:slots].astype(np.uint32)

        if recompute_bounds:
            bounds = self.inventory.bounds(self.quantizer)
            if bounds is not None:
                out.mins = np.array(bounds[0])
                out.maxs = np.array(bounds[1])
        else:
            out.mins = np.array(header.mins, dtype=np.float64)
            out.maxs = np.array(header.maxs, dtype=np.float64)
        self.finalized = True

    def close(self):
        """Close the writer and return the number of bytes written."""
        if self._dest is None:
            return 0
        try:
            if self._writer is not None:
                self._flush()
                self._writer.close()
            self._dest.seek(0, io.SEEK_END)
            total_bytes = self._dest.tell()
            if self.path == STDIO:
                self._dest.seek(0)
                shutil.copyfileobj(self._dest, sys.stdout.buffer)
                sys.stdout.buffer.flush()
        except (OSError, LaspyException) as e:
            raise StreamIOError(f"failed closing '{self.name}': {e}") from e
        finally:
            self._writer = None
            self._dest.close()
            self._dest = None
        return total_bytes
