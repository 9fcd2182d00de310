#!/usr/bin/env python3
"""
Командная строка pnmkit.
Просмотр сведений о файлах PBM/PGM и пакетное применение преобразований.

Операции `convert` выполняются в фиксированном порядке:
max value, invert, flip, flop, rotate, to-bitmap, variant.
"""

import argparse
import logging
import sys

from pnmkit.config import CodecSettings
from pnmkit.exceptions import PnmError
from pnmkit.models.grayscale import GrayscaleImage
from pnmkit.models.raster import Variant
from pnmkit.services.editor_service import EditorService
from pnmkit.services.image_service import ImageService

logger = logging.getLogger("pnmkit")


def build_parser():
    parser = argparse.ArgumentParser(prog="pnmkit", description="Inspect and transform PBM/PGM images")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    sub = parser.add_subparsers(dest="command", required=True)

    info = sub.add_parser("info", help="Print format, size and max value of images")
    info.add_argument("files", nargs="+", help="PBM/PGM files")

    convert = sub.add_parser("convert", help="Transform an image and write the result")
    convert.add_argument("input", help="Input PBM/PGM file path")
    convert.add_argument("output", help="Output file path")
    convert.add_argument("--invert", action="store_true", help="Invert pixel values")
    convert.add_argument("--flip", action="store_true", help="Mirror horizontally")
    convert.add_argument("--flop", action="store_true", help="Mirror vertically")
    convert.add_argument("--rotate", type=int, default=0, choices=(0, 90, 180, 270),
                         help="Rotate clockwise by this many degrees")
    convert.add_argument("--to-bitmap", action="store_true", help="Threshold a grayscale image into a bitmap")
    convert.add_argument("--threshold", type=int, default=None,
                         help="Threshold for --to-bitmap (default: max value // 2)")
    convert.add_argument("--otsu", action="store_true", help="Use Otsu's threshold for --to-bitmap")
    convert.add_argument("--variant", choices=[v.value for v in Variant], default=None,
                         help="Output encoding (default: keep the input encoding)")
    convert.add_argument("--max-value", type=int, default=None, help="Rescale grayscale pixels to a new max value")
    convert.add_argument("--comment", default=None, help="Comment line to write into the header")
    convert.add_argument("--strict-rows", action="store_true", help="Reject short rows in P1 input")
    return parser


def _configure_logging(args):
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def run_info(args):
    service = ImageService()
    for path in args.files:
        data = service.load_data(path)
        print(data.describe())


def run_convert(args):
    if args.to_bitmap and args.threshold is not None and args.otsu:
        raise PnmError("--threshold and --otsu are mutually exclusive")
    settings = CodecSettings(comment=args.comment, strict_rows=args.strict_rows, threshold=args.threshold)
    editor = EditorService(image_service=ImageService(settings))
    editor.open(args.input)

    if args.max_value is not None:
        editor.apply("max_value", value=args.max_value)
    if args.invert:
        editor.apply("invert")
    if args.flip:
        editor.apply("flip")
    if args.flop:
        editor.apply("flop")
    for _ in range(args.rotate // 90):
        editor.apply("rotate90cw")
    if args.to_bitmap and not isinstance(editor.image, GrayscaleImage):
        logger.warning("%s is already a bitmap, --to-bitmap ignored", args.input)
    elif args.to_bitmap:
        if args.otsu:
            editor.apply("to_bitmap", method="otsu")
        else:
            editor.apply("to_bitmap", threshold=settings.threshold)
    if args.variant:
        editor.apply(args.variant)

    editor.save(args.output)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    try:
        if args.command == "info":
            run_info(args)
        else:
            run_convert(args)
    except PnmError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
