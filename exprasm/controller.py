"""Compile sample expressions, assemble and run them, and check their results."""

from __future__ import annotations

import argparse
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from exprasm.compiler import compile_expression

COMPILED_DIR = "compiled-files"
EXECUTABLE = "assembled_machine_code.exe"
OUTPUT_FILE = "output.txt"

CASES = (
    ("23647", 23647, 0),
    ("11+5", 16, 1),
    ("10/5+3*2*3-11", 9, 2),
    ("10/5+3*2-11+5", 2, 3),
    ("10 / 5 +3*  2-11 + 5", 2, 4),
    (" 1 + 4 ", 5, 5),
    ("2*(3+8)", 22, 6),
    (" 2 * (11 - 2 ) ", 18, 7),
    ("2.0", 2, 8),
    ("2.0+1.0", 3, 9),
    ("2.0+1.0+3.0", 6, 9),
    ("1+2.0", 3, 10),
    ("1+2.0+3", 6, 11),
    ("2.5 + 2.5", 5, 12),
    ("5.0 - 2", 3, 13),
    ("2 + 3.0 - 5 + 6.0", 6, 14),
    ("2 + 2.5", 4.5, 15),
    ("3.5 - 2.2 + 8.1", 9.4, 16),
    ("2.0 * 3.0", 6, 17),
    ("2 * 3.4", 6.8, 18),
    ("3 + 4.5 * 2 - 8", 4, 19),
    (" 3.0 / 2", 1.5, 20),
    ("1 / 3.0 * 3", 1, 21),
    ("1 / 3 * 3.0", 0, 22),
    ("1 * (2 + 3.0) ", 5, 23),
    ("1 * 4 / 2 +6.6 - 9 / (1 + 2)", 5.6, 24),
)

_LEADING_NUMBER = re.compile(
    r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
)


@dataclass(frozen=True)
class CaseResult:
    """Outcome of compiling and running one expression."""

    expression: str
    expected: float
    actual: float
    output: str

    @property
    def passed(self) -> bool:
        return self.actual == self.expected


def _leading_float(text: str) -> float:
    match = _LEADING_NUMBER.match(text)
    return float(match.group()) if match else 0.0


def write_compiled_to_file(compiled, file_index, directory=COMPILED_DIR):
    """Write assembly to ``directory/compiled_assembly-<index>.s`` and return its path."""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / f"compiled_assembly-{file_index}.s"
    path.write_text(compiled)
    print(f"\nCompiled assembly code written to file {path}\n")
    return path


def read_output(path=OUTPUT_FILE):
    """Return the text the assembled program wrote."""
    return Path(path).read_text()


def run_case(expression, expected, file_index, workdir="."):
    """Compile, assemble and run ``expression`` in ``workdir`` and compare its result."""
    workdir = Path(workdir)
    compiled = compile_expression(expression, workdir)
    write_compiled_to_file(compiled, file_index, workdir / COMPILED_DIR)

    source = Path(COMPILED_DIR) / f"compiled_assembly-{file_index}.s"
    subprocess.run(["gcc", "-o", EXECUTABLE, str(source)], cwd=workdir, check=False)
    subprocess.run([str(workdir.resolve() / EXECUTABLE)], cwd=workdir, check=False)

    output = read_output(workdir / OUTPUT_FILE)
    print(f"Output from running assembled machine code: {output}\n")

    result = CaseResult(expression, expected, _leading_float(output), output)
    if result.passed:
        print("Test Passed!")
    else:
        print(
            "****************OH NO*********!!!!! Test failed,\n"
            f" expected result {expected:f}, actual result {result.actual:f}"
        )
    return result


def main(argv=None):
    """Run every sample case and report how many failed."""
    parser = argparse.ArgumentParser(
        prog="exprasm", description="Compile, assemble and check sample expressions."
    )
    parser.add_argument(
        "--workdir", default=".", help="directory holding the fragments and build output"
    )
    args = parser.parse_args(argv)

    failed = sum(
        not run_case(expression, expected, index, args.workdir).passed
        for expression, expected, index in CASES
    )
    if failed:
        print(f"\n****************OH NO*********!!!!! {failed} test(s) failed!")
    else:
        print("\nAwesome! All tests passed!")
    return 0