# mipsasm/mips_batch.py
import re
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path

from mipsasm.mips_consts import SOURCE_EXTENSIONS, OUTPUT_EXTENSION
from mipsasm.mips_assembler import MipsAssembler
from mipsasm.mips_errors import AssemblerError
from mipsasm.mips_source import format_source

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = re.compile(r'\.(asm|s)$')


def output_name(file_name):
    """foo.asm / foo.s -> foo.hex"""
    return SOURCE_SUFFIX.sub(OUTPUT_EXTENSION, file_name)


def read_source(path):
    return format_source(Path(path).read_text(encoding="utf-8"))


def source_files(input_dir):
    """ Every .asm/.s file in input_dir, sorted by name. """
    paths = [p for p in sorted(Path(input_dir).iterdir())
             if p.is_file() and p.name.endswith(SOURCE_EXTENSIONS)]
    logger.debug(f"Found {len(paths)} source files in {input_dir}")
    return paths


def read_files(input_dir):
    """ Reads and normalises every source file in input_dir. """
    return [(path.name, read_source(path)) for path in source_files(input_dir)]


def _failed(file_name, message, warnings=()):
    error = {"file": file_name, "line": None, "message": message}
    return {"file": file_name, "binary": None, "errors": [error], "warnings": list(warnings)}


def assemble_file(job, max_image_size=None):
    """ Assembles one (file_name, lines) job. Never raises.

    Returns {"file", "binary", "errors", "warnings"}; binary is None when the
    file failed.
    """
    file_name, lines = job
    assembler = MipsAssembler(max_image_size=max_image_size)
    try:
        binary, _ = assembler.assemble_lines(lines, file_name)
    except AssemblerError as e:
        return {"file": file_name, "binary": None, "errors": [e.to_dict()], "warnings": assembler.warnings}
    except Exception as e:
        logger.error(f"Unexpected exception while assembling {file_name}: {e}", exc_info=True)
        return _failed(file_name, f"Internal error: {e}", warnings=assembler.warnings)
    return {"file": file_name, "binary": binary, "errors": [], "warnings": assembler.warnings}


def assemble_path(path):
    """ Reads and assembles one source file. Never raises. """
    path = Path(path)
    try:
        lines = read_source(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read {path}: {e}")
        return _failed(path.name, f"Could not read file: {e}")
    return assemble_file((path.name, lines))


def _run_tasks(task, items, max_workers):
    if not items:
        return []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(task, items))


def assemble_all(jobs, max_workers=None, max_image_size=None):
    """ Assembles every job concurrently, one task per file.

    Files share no state, so a failing file only marks its own result.
    Results come back in job order once every task has finished.
    """
    return _run_tasks(partial(assemble_file, max_image_size=max_image_size), jobs, max_workers)


def write_hex(results, output_dir):
    """ Writes the raw image of every successful result; returns written paths. """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for result in results:
        if result["binary"] is None:
            continue
        path = output_dir / output_name(result["file"])
        path.write_bytes(result["binary"])
        logger.debug(f"Wrote {len(result['binary'])} bytes to {path}")
        written.append(path)
    return written


def report_failures(results):
    failed = [r for r in results if r["binary"] is None]
    for result in failed:
        for error in result["errors"]:
            logger.error(f"{error['file']}:{error['line']}: {error['message']}")
    return failed


def assemble_directory(input_dir, output_dir, max_workers=None):
    """ Assembles every source file in input_dir into output_dir. """
    # Read per task, an unreadable file fails on its own
    results = _run_tasks(assemble_path, source_files(input_dir), max_workers)
    failed = report_failures(results)
    written = write_hex(results, output_dir)
    logger.info(f"Assembled {len(written)} file(s), {len(failed)} failed")
    return results


def assemble_one(path):
    """ Assembles a single file and writes the .hex image next to it.

    Raises AssemblerError if the file does not assemble.
    """
    path = Path(path)
    binary, _ = MipsAssembler().assemble_lines(read_source(path), path.name)
    out_path = path.with_name(output_name(path.name))
    out_path.write_bytes(binary)
    logger.info(f"Wrote {len(binary)} bytes to {out_path}")
    return out_path
