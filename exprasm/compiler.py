"""Compile integer and floating point arithmetic expressions to x86-64 assembly."""

from __future__ import annotations

import enum
from pathlib import Path

INT_DATA_FRAGMENT = "fragment-sectiondata-int-out.s"
FLOAT_DATA_FRAGMENT = "fragment-sectiondata-float-out.s"
MAIN_FRAGMENT = "fragment-main-out.s"

_DIGITS = frozenset("0123456789")

_TEXT_HEADER = ".section .text\n.global main\n\nmain:\n"
_DATA_HEADER = ".section .data\n\n"

_SAVE_FLOAT_RESULT = (
    "\n"
    "\tsub $8, %rsp\t\t\t# save result of float operation to stack\n"
    "\tmovsd %xmm0, (%rsp)\n\n"
)

_POP_RIGHT = {
    "FLOAT": (
        "\n"
        "\tmovsd (%rsp), %xmm1\t\t# pop right hand operand float from stack into xmm1\n"
        "\tadd $8, %rsp\n"
    ),
    "INT": (
        "\n"
        "\tpop %rax\t\t\t\t# pop right hand operand int from stack into rax\n"
        "\tcvtsi2sd %rax, %xmm1\t# Convert int rax to float in xmm1\n"
    ),
}

_POP_LEFT = {
    "FLOAT": (
        "\n"
        "\tmovsd (%rsp), %xmm0\t\t# pop left hand operand float from stack into xmm0\n"
        "\tadd $8, %rsp\n"
    ),
    "INT": (
        "\n"
        "\tpop %rax\t\t\t\t# pop left hand operand int from stack into rax\n"
        "\tcvtsi2sd %rax, %xmm0\t# Convert int rax to float in xmm0\n"
    ),
}

_TERM_INT_POP = (
    "\n"
    "\tpop %rbx\t\t\t# pop right hand operand int from stack into rbx\n"
    "\tpop %rax\t\t\t# pop left hand operand int from stack into rax\n"
)
_TERM_INT_OPS = {
    "*": "\timul %rbx, %rax\t\t# operation: rax = rax * rbx\n",
    "/": (
        "\tcqo\t\t\t\t\t# convert quad rax to octal rdx:rax\n"
        "\tidiv %rbx\t\t\t# operation: rax = rdx:rax / rbx\n"
    ),
}
_TERM_INT_PUSH = "\tpush %rax\t\t\t# save result of operation on stack\n\n"
_TERM_FLOAT_OPS = {
    "*": "\n\tmulsd %xmm1, %xmm0\t\t# float operation: xmm0 = xmm0 * xmm1\n",
    "/": "\n\tdivsd %xmm1, %xmm0\t\t# float operation: xmm0 = xmm0 / xmm1\n",
}

_EXPR_INT_POP = (
    "\n"
    "\tpop %rbx\t\t\t# pop right hand operand int from stack into rbx\n"
    "\tpop %rax\t\t\t# pop left hand operand int from stack into rax\n\n"
)
_EXPR_INT_OPS = {
    "+": "\n\tadd %rbx, %rax\t\t# int operation: rax = rax + rbx\n",
    "-": "\n\tsub %rbx, %rax\t\t# int operation: rax = rax - rbx\n",
}
_EXPR_INT_PUSH = "\tpush %rax\t\t\t\t# save result of int operation to stack\n\n"
_EXPR_FLOAT_OPS = {
    "+": "\n\taddsd %xmm1, %xmm0\t\t# float operation: xmm0 = xmm0 + xmm1\n",
    "-": "\n\tsubsd %xmm1, %xmm0\t\t# float operation: xmm0 = xmm0 - xmm1\n",
}


class DataType(enum.Enum):
    """Type of a value on the evaluation stack."""

    INT = "INT"
    FLOAT = "FLOAT"


class CompileError(ValueError):
    """Raised when an expression cannot be compiled."""


class Compiler:
    """Single-pass recursive-descent compiler for one arithmetic expression."""

    def __init__(self, source, fragment_dir="."):
        self.source = source
        self.fragment_dir = Path(fragment_dir)
        self.result_type: DataType | None = None
        self._reset()

    def _reset(self) -> None:
        self._text: list[str] = []
        self._data: list[str] = []
        self._pos = 0
        self._current = ""
        self._float_index = 0

    def compile(self) -> str:
        """Return the complete assembly program for the expression."""
        self._reset()
        self._text.append(_TEXT_HEADER)
        self._data.append(_DATA_HEADER)
        self._text.append(f"\t# Evaluating: {self.source}\n\n")

        self._advance()
        result_type = self._parse_expression()

        data_fragment = (
            INT_DATA_FRAGMENT if result_type is DataType.INT else FLOAT_DATA_FRAGMENT
        )
        self._data.append(self._load_fragment(data_fragment))
        self._text.append(self._load_fragment(MAIN_FRAGMENT))

        self.result_type = result_type
        return "".join(self._data) + "\n" + "".join(self._text)

    def _load_fragment(self, name: str) -> str:
        # Fragments are written in printf format, where "%%" stands for "%".
        return (self.fragment_dir / name).read_text().replace("%%", "%")

    def _advance(self) -> None:
        self._current = self.source[self._pos] if self._pos < len(self.source) else ""
        self._pos += 1

    def _skip_whitespace(self) -> None:
        while self._current == " ":
            self._advance()

    def _parse_number(self) -> DataType:
        chars = []
        while self._current in _DIGITS or self._current == ".":
            chars.append(self._current)
            self._advance()
        literal = "".join(chars)

        if "." not in literal:
            self._text.append(f"\tpush ${literal}\t\t# Push int to stack\n\n")
            return DataType.INT

        label = f"float_var_{self._float_index}"
        self._float_index += 1
        self._data.append(f"{label}: .double {literal}\n")
        self._text.append("\tsub $8, %rsp\t\t\t# Push float (as double) to stack\n")
        self._text.append(f"\tmovsd {label}(%rip), %xmm0\n")
        self._text.append("\tmovsd %xmm0, (%rsp)\n\n")
        return DataType.FLOAT

    def _parse_bracketed(self) -> DataType:
        self._advance()
        result_type = self._parse_expression()
        self._skip_whitespace()
        if self._current != ")":
            raise CompileError("expected )")
        self._advance()
        return result_type

    def _parse_factor(self) -> DataType:
        self._skip_whitespace()
        if self._current in _DIGITS:
            return self._parse_number()
        if self._current == "(":
            return self._parse_bracketed()
        found = repr(self._current) if self._current else "end of input"
        raise CompileError(f"expected number or ( at position {self._pos - 1}, found {found}")

    def _pop_operands(self, left: DataType, right: DataType) -> None:
        self._text.append(_POP_RIGHT[right.value])
        self._text.append(_POP_LEFT[left.value])

    def _parse_term(self) -> DataType:
        left = self._parse_factor()
        result = left
        self._skip_whitespace()
        while self._current in ("*", "/"):
            operator = self._current
            self._advance()
            right = self._parse_factor()
            if DataType.FLOAT in (left, right):
                result = DataType.FLOAT

            if result is DataType.INT:
                self._text.append(_TERM_INT_POP)
                self._text.append(_TERM_INT_OPS[operator])
                self._text.append(_TERM_INT_PUSH)
            else:
                self._pop_operands(left, right)
                self._text.append(_TERM_FLOAT_OPS[operator])
                self._text.append(_SAVE_FLOAT_RESULT)
                left = result
            self._skip_whitespace()
        return result

    def _parse_expression(self) -> DataType:
        left = self._parse_term()
        result = left
        self._skip_whitespace()
        while self._current in ("+", "-"):
            operator = self._current
            self._advance()
            right = self._parse_term()
            if DataType.FLOAT in (left, right):
                result = DataType.FLOAT

            if result is DataType.INT:
                self._text.append(_EXPR_INT_POP)
                self._text.append(_EXPR_INT_OPS[operator])
                self._text.append(_EXPR_INT_PUSH)
            else:
                self._pop_operands(left, right)
                self._text.append(_EXPR_FLOAT_OPS[operator])
                self._text.append(_SAVE_FLOAT_RESULT)
                left = result
            self._skip_whitespace()
        return result


def compile_expression(source, fragment_dir="."):
    """Compile ``source`` into an assembly program using fragments from ``fragment_dir``."""
    return Compiler(source, fragment_dir).compile()