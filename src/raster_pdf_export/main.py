#!/usr/bin/env python3
"""
Raster PDF Export command line

Exports an image file or a page of an existing PDF as an A4 image PDF.
"""

import sys
import logging
import argparse
from pathlib import Path

from . import config
from .error_handling import ExportError
from .logger_manager import LoggerManager
from .pipelines import RotatedPipeline, SinglePagePipeline
from .rasterizers import ImageRasterizer, PdfPageRasterizer
from .version import VERSION


def build_parser():
    parser = argparse.ArgumentParser(
        prog="raster-pdf-export",
        description="Export an image or PDF page as a paginated A4 PDF",
    )
    parser.add_argument("input", type=Path, help="Image file or PDF to export")
    parser.add_argument("-o", "--output", type=Path, help="Output PDF path")
    parser.add_argument("--mode", choices=("single", "rotated"), default="rotated",
                        help="single: one portrait page; rotated: upright landscape pages (default)")
    parser.add_argument("--page", type=int, default=1, help="Page of a PDF input (1-based)")
    parser.add_argument("--scale", type=float, help="Capture scale")
    parser.add_argument("--log-dir", type=Path, help="Directory for log files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug messages")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def main(argv=None):
    """Command line entry point"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s - %(message)s')

    is_pdf = args.input.suffix.lower() == ".pdf"
    if is_pdf:
        rasterizer = PdfPageRasterizer()
        element_ref = (args.input, args.page - 1)
        scale = args.scale if args.scale is not None else config.CAPTURE_SCALE
    else:
        rasterizer = ImageRasterizer()
        element_ref = args.input
        scale = args.scale if args.scale is not None else 1.0

    if args.mode == "single":
        pipeline_class = SinglePagePipeline
        default_output = config.DEFAULT_SINGLE_FILENAME
    else:
        pipeline_class = RotatedPipeline
        default_output = config.DEFAULT_ROTATED_FILENAME if is_pdf else config.DEFAULT_IMAGE_FILENAME

    logger_manager = LoggerManager(log_directory=args.log_dir, log_callback=print if args.verbose else None)
    pipeline = pipeline_class(rasterizer, logger_manager, capture_scale=scale)

    try:
        result = pipeline.export(element_ref, args.output or default_output)
    except ExportError as e:
        print(f"Export failed: {e}", file=sys.stderr)
        return 1
    finally:
        logger_manager.finalize_session()
        if args.log_dir:
            logger_manager.save_log_file(args.log_dir)
        logger_manager.close()

    print(f"Created {result.path} with {result.page_count} page{'s' if result.page_count != 1 else ''}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
