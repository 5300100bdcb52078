# mipsasm/tests/test_batch.py
import pytest
from mipsasm.mips_assembler import MipsAssembler
from mipsasm.mips_batch import (
    output_name, read_files, assemble_all, assemble_directory, assemble_one, write_hex
)
from mipsasm.mips_errors import UnknownLabel
from mipsasm.cli import main

PROGRAM_A = """
main: li $t0, 0x12345678
      la $a0, msg
      j main
.data
msg:  .asciiz "hello"
"""

PROGRAM_B = """
loop: addi $t0, $t0, 1
      bne $t0, $t1, loop
"""

BROKEN = """
      nop
      j nowhere
"""


@pytest.fixture
def source_dir(tmp_path):
    src = tmp_path / "0-assembly"
    src.mkdir()
    (src / "a.asm").write_text(PROGRAM_A)
    (src / "b.s").write_text(PROGRAM_B)
    (src / "c.asm").write_text(BROKEN)
    (src / "notes.txt").write_text("not assembly")
    return src


@pytest.mark.parametrize("name, expected", [
    ("prog.asm", "prog.hex"), ("x.s", "x.hex"), ("weird.s.asm", "weird.s.hex"),
])
def test_output_name(name, expected):
    assert output_name(name) == expected


def test_read_files_filters_extensions(source_dir):
    jobs = read_files(source_dir)
    assert [name for name, _ in jobs] == ["a.asm", "b.s", "c.asm"]
    assert jobs[2][1] == [("nop", 2), ("j nowhere", 3)]


def test_assemble_directory(source_dir, tmp_path):
    out = tmp_path / "1-hex"
    results = assemble_directory(source_dir, out)

    assert sorted(p.name for p in out.iterdir()) == ["a.hex", "b.hex"]
    # Batch output is identical to assembling each file alone
    assert (out / "a.hex").read_bytes() == MipsAssembler().assemble(PROGRAM_A)["binary"]
    assert (out / "b.hex").read_bytes() == MipsAssembler().assemble(PROGRAM_B)["binary"]

    failed = [r for r in results if r["binary"] is None]
    assert [r["file"] for r in failed] == ["c.asm"]
    assert failed[0]["errors"] == [{"file": "c.asm", "line": 3, "message": "Label 'nowhere' was not found."}]


def test_undecodable_file_does_not_stop_siblings(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.asm").write_text("nop")
    (src / "b.asm").write_bytes(b"nop # \xff\xfe")
    out = tmp_path / "out"

    results = assemble_directory(src, out)

    assert [r["file"] for r in results] == ["a.asm", "b.asm"]
    assert (out / "a.hex").read_bytes() == b"\x00\x00\x00\x00"
    assert not (out / "b.hex").exists()
    assert results[1]["binary"] is None
    assert results[1]["errors"][0]["file"] == "b.asm"
    assert results[1]["errors"][0]["line"] is None
    assert results[1]["errors"][0]["message"].startswith("Could not read file:")


def test_assemble_all_is_order_preserving(source_dir):
    jobs = read_files(source_dir)
    results = assemble_all(jobs, max_workers=2)
    assert [r["file"] for r in results] == ["a.asm", "b.s", "c.asm"]
    alone = [assemble_all([job])[0] for job in jobs]
    assert [r["binary"] for r in results] == [r["binary"] for r in alone]


def test_assemble_all_empty():
    assert assemble_all([]) == []


def test_write_hex_skips_failures(tmp_path):
    results = [
        {"file": "ok.asm", "binary": b"\x00\x00\x00\x0c", "errors": [], "warnings": []},
        {"file": "bad.asm", "binary": None, "errors": [{"message": "x"}], "warnings": []},
    ]
    written = write_hex(results, tmp_path / "out")
    assert [p.name for p in written] == ["ok.hex"]
    assert written[0].read_bytes() == b"\x00\x00\x00\x0c"


def test_assemble_one(tmp_path):
    path = tmp_path / "prog.asm"
    path.write_text(PROGRAM_B)
    out_path = assemble_one(path)
    assert out_path == tmp_path / "prog.hex"
    assert out_path.read_bytes() == MipsAssembler().assemble(PROGRAM_B)["binary"]


def test_assemble_one_raises(tmp_path):
    path = tmp_path / "broken.s"
    path.write_text(BROKEN)
    with pytest.raises(UnknownLabel) as excinfo:
        assemble_one(path)
    assert excinfo.value.file_name == "broken.s"
    assert excinfo.value.line_num == 3
    assert not (tmp_path / "broken.hex").exists()


def test_cli_directory_mode(source_dir, tmp_path):
    out = tmp_path / "hex-out"
    assert main(["-i", str(source_dir), "-o", str(out), "-j", "2"]) == 1 # c.asm fails
    assert (out / "a.hex").exists()


def test_cli_file_mode(tmp_path):
    path = tmp_path / "prog.asm"
    path.write_text(PROGRAM_A)
    assert main([str(path)]) == 0
    assert (tmp_path / "prog.hex").exists()
    assert main([str(tmp_path / "missing.asm")]) == 1


def test_cli_file_mode_undecodable(tmp_path):
    path = tmp_path / "bad.asm"
    path.write_bytes(b"\xff\xfe nop")
    assert main([str(path)]) == 1
    assert not (tmp_path / "bad.hex").exists()
