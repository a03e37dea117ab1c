import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from lastransform.errors import ConfigError, LasTransformError
from lastransform.las_io import DEFAULT_CHUNK_SIZE, LasPointSink, LasPointSource
from lastransform.logging_config import setup_logging
from lastransform.pipeline import run_transform

logger = logging.getLogger(__name__)

EXAMPLES = """examples:
  las-transform -t trans.txt in.las out.las
  las-transform -t trans.txt -i in.las -o out.laz -v
  las-transform -t trans.txt --olaz - - < in.las > out.laz
"""


@dataclass(frozen=True)
class RunConfig:
    transform_path: str
    input_path: str
    output_path: str
    compress: Optional[bool] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    verbosity: int = 0
    log_dir: Optional[str] = None


class ArgumentParser(argparse.ArgumentParser):
    # report bad arguments to the caller instead of exiting
    def error(self, message):
        raise ConfigError(message)


def build_parser():
    parser = ArgumentParser(
        prog="las-transform",
        description="Apply a transformation matrix to a LAS/LAZ point cloud",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument('-h', '--help', action='store_true', help='Show this message and exit')
    parser.add_argument('-t', '--transformation_txt', help='Path to transformation matrix text file')
    parser.add_argument('-i', '--input_las_path', help="Path to input LAS/LAZ file, '-' for standard input")
    parser.add_argument('-o', '--output_las_path', help="Path to output LAS/LAZ file, '-' for standard output")
    parser.add_argument('paths', nargs='*', metavar='PATH', help='Input and/or output path when -i/-o are not given')
    parser.add_argument('--olaz', action='store_true', help='Compress output written to standard output')
    parser.add_argument('--chunk_size', type=int, default=DEFAULT_CHUNK_SIZE, help='Points read and written per chunk')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='Report progress and timing (-vv for point details)')
    parser.add_argument('--log_dir', help='Directory for a log file')
    return parser


def build_config(args):
    input_path = args.input_las_path
    output_path = args.output_las_path
    paths = list(args.paths)
    if input_path is None and paths:
        input_path = paths.pop(0)
    if output_path is None and paths:
        output_path = paths.pop(0)
    if paths:
        raise ConfigError(f"cannot understand argument '{paths[0]}'")

    if not args.transformation_txt:
        raise ConfigError("You should provide transformation.txt like '-t trans.txt'")
    if not input_path:
        raise ConfigError("no input specified")
    if not output_path:
        raise ConfigError("no output specified")
    if args.chunk_size < 1:
        raise ConfigError(f"--chunk_size must be positive, got {args.chunk_size}")

    return RunConfig(
        transform_path=args.transformation_txt,
        input_path=input_path,
        output_path=output_path,
        compress=True if args.olaz else None,
        chunk_size=args.chunk_size,
        verbosity=args.verbose,
        log_dir=args.log_dir,
    )


def parse_config(argv=None):
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)
    if args.help:
        return None
    return build_config(args)


def main(argv=None):
    parser = build_parser()
    try:
        config = parse_config(argv)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1
    if config is None:
        parser.print_help(sys.stderr)
        return 1

    setup_logging(config.verbosity, config.log_dir)
    source = LasPointSource(config.input_path, chunk_size=config.chunk_size)
    sink = LasPointSink(config.output_path, compress=config.compress, chunk_size=config.chunk_size)
    try:
        run_transform(config.transform_path, source, sink)
    except LasTransformError as e:
        logger.error("ERROR: %s", e)
        return 1
    return 0
