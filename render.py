import os
import re
import sys
import time
import warnings
from argparse import ArgumentParser
from dataclasses import dataclass
from itertools import islice
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf
import numpy as np

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")

import PIL.Image

from mandelbrot import (
    DEFAULT_MAX_ITERATIONS,
    MAX_ITERATIONS_LIMIT,
    RenderParameters,
    parse_size,
    parse_viewport,
    render_frame,
    split_rows,
)

DEFAULT_THREADS = 4
DEFAULT_FORMAT = "png"

# Options followed by a value; everything else starting with "-" is a flag
# unless it looks like a negative number.
_VALUED_OPTIONS = {"--max-iterations", "--threads", "--format"}
_NEGATIVE_NUMBER = re.compile(r"^-\.?\d")


@dataclass(frozen=True)
class OutputConfig:
    path: Path
    image_format: str


def build_parser():
    parser = ArgumentParser(
        prog="mandelbrot-render",
        description="Render the Mandelbrot set to an image file.",
        epilog="Example: mandelbrot-render mandel.png 1000x750 -1.20,0.35 -1.0,0.20",
        allow_abbrev=False,
    )

    parser.add_argument('file', metavar='FILE',
                        help='path of the image to write')

    parser.add_argument('pixels', metavar='PIXELS',
                        help='image size as WIDTHxHEIGHT, e.g. 1000x750')

    parser.add_argument('upper_left', metavar='UPPERLEFT',
                        help='complex point at the upper-left corner as RE,IM, e.g. -1.20,0.35')

    parser.add_argument('lower_right', metavar='LOWERRIGHT',
                        help='complex point at the lower-right corner as RE,IM, e.g. -1.0,0.20')

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iterations after which a point is considered inside the set',
                        metavar='MAX_ITERATIONS', default=DEFAULT_MAX_ITERATIONS)

    parser.add_argument('--threads', type=int,
                        dest='threads', help='number of worker threads, each rendering a band of rows',
                        metavar='THREADS', default=DEFAULT_THREADS)

    parser.add_argument('--format', type=str,
                        dest='format', help='image format understood by Pillow. Default: taken from FILE, else "png".',
                        metavar='FORMAT', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics and timings.')

    return parser


def isolate_positionals(argv):
    """Move positional values behind ``--`` so negative coordinates are not read as options."""

    options = []
    positionals = []
    tokens = iter(argv)
    for token in tokens:
        if token == "--":
            positionals.extend(tokens)
            break
        if token.startswith("-") and len(token) > 1 and not _NEGATIVE_NUMBER.match(token):
            options.append(token)
            if token in _VALUED_OPTIONS:
                options.extend(islice(tokens, 1))
        else:
            positionals.append(token)
    return [*options, "--", *positionals]


def _pil_format_name(ext: str):
    extensions = PIL.Image.registered_extensions()
    name = extensions.get(f".{ext.lower()}", ext.upper())
    # Some registered formats can only be opened, not saved.
    if name in PIL.Image.SAVE:
        return name
    return None


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    path = Path(opt.file).expanduser()
    requested = opt.format or path.suffix.lstrip(".") or DEFAULT_FORMAT
    image_format = _pil_format_name(requested)
    if image_format is None:
        parser.error(f"unsupported image format '{requested}'.")

    return OutputConfig(path=path, image_format=image_format)


def resolve_render_parameters(opt, parser: ArgumentParser) -> RenderParameters:
    try:
        width, height = parse_size(opt.pixels)
    except ValueError as exc:
        parser.error(f"PIXELS: {exc}")

    try:
        viewport = parse_viewport(opt.upper_left, opt.lower_right)
    except ValueError as exc:
        parser.error(f"UPPERLEFT/LOWERRIGHT: {exc}")

    if not 1 <= opt.max_iterations <= MAX_ITERATIONS_LIMIT:
        parser.error(f"--max-iterations must be between 1 and {MAX_ITERATIONS_LIMIT}.")
    if opt.threads < 1:
        parser.error("--threads must be at least 1.")

    return RenderParameters(
        width=width,
        height=height,
        viewport=viewport,
        max_iterations=opt.max_iterations,
    )


def write_image(pixels: np.ndarray, output: OutputConfig) -> None:
    """Encode the grayscale ``pixels`` and write them to the configured path."""

    image = PIL.Image.fromarray(pixels)
    image.save(str(output.path), format=output.image_format)


def main(argv=None):
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]
    opt = parser.parse_args(isolate_positionals(argv))

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    params = resolve_render_parameters(opt, parser)
    output = resolve_output_config(opt, parser)

    log("TensorFlow version: %s" % tf.__version__)
    log("Threads: {0}".format(opt.threads))
    log("Bands: {0}".format(split_rows(params.height, opt.threads)))

    started = time.perf_counter()
    result = render_frame(params, threads=opt.threads)
    log("Rendered {0}x{1} in {2:.3f}s".format(params.width, params.height, time.perf_counter() - started))

    try:
        write_image(result.pixels, output)
    except OSError as exc:
        print(f"error: cannot write {output.path}: {exc.strerror or exc}", file=sys.stderr)
        return 1

    log("Wrote {0} ({1})".format(output.path, output.image_format))
    return 0


if __name__ == '__main__':
    sys.exit(main())
