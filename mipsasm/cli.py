# mipsasm/cli.py
"""
Assemble MIPS assembly (.asm / .s) into raw machine-code images (.hex).

With no files given, every source file in the input directory is assembled
into the output directory. Files given explicitly are written next to their
source.
"""
import argparse
import logging
import sys

from mipsasm.mips_consts import DEFAULT_INPUT_DIR, DEFAULT_OUTPUT_DIR
from mipsasm.mips_batch import assemble_directory, assemble_one
from mipsasm.mips_errors import AssemblerError

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(prog="mipsasm", description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("files", nargs="*", help="assembly files to assemble individually")
    parser.add_argument("-i", "--input-dir", default=DEFAULT_INPUT_DIR,
                        help=f"directory scanned for sources (default: {DEFAULT_INPUT_DIR})")
    parser.add_argument("-o", "--output-dir", default=DEFAULT_OUTPUT_DIR,
                        help=f"directory the .hex images are written to (default: {DEFAULT_OUTPUT_DIR})")
    parser.add_argument("-j", "--jobs", type=int, default=None,
                        help="number of files assembled concurrently")
    parser.add_argument("-v", "--verbose", action="store_true", help="output debug information")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.files:
        failures = 0
        for file_name in args.files:
            try:
                assemble_one(file_name)
            except AssemblerError as e:
                logger.error(str(e))
                failures += 1
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Could not read {file_name}: {e}")
                failures += 1
        return 1 if failures else 0

    try:
        results = assemble_directory(args.input_dir, args.output_dir, max_workers=args.jobs)
    except OSError as e:
        logger.error(f"Could not read {args.input_dir}: {e}")
        return 1
    return 1 if any(r["binary"] is None for r in results) else 0


if __name__ == "__main__":
    sys.exit(main())
