import pytest

from exprasm.compiler import (
    FLOAT_DATA_FRAGMENT,
    INT_DATA_FRAGMENT,
    MAIN_FRAGMENT,
    CompileError,
    Compiler,
    DataType,
    compile_expression,
)


@pytest.fixture
def fragments(tmp_path):
    (tmp_path / INT_DATA_FRAGMENT).write_text('int_format: .asciz "%%d"\n')
    (tmp_path / FLOAT_DATA_FRAGMENT).write_text('float_format: .asciz "%%f"\n')
    (tmp_path / MAIN_FRAGMENT).write_text("\tcall print_result\n")
    return tmp_path


def test_single_integer_program(fragments):
    expected = (
        ".section .data\n\n"
        'int_format: .asciz "%d"\n'
        "\n"
        ".section .text\n.global main\n\nmain:\n"
        "\t# Evaluating: 23647\n\n"
        "\tpush $23647\t\t# Push int to stack\n\n"
        "\tcall print_result\n"
    )
    assert compile_expression("23647", fragments) == expected


def test_integer_result_type(fragments):
    compiler = Compiler("11+5", fragments)
    output = compiler.compile()
    assert compiler.result_type is DataType.INT
    assert 'int_format: .asciz "%d"' in output
    assert "float_format" not in output
    assert "add %rbx, %rax" in output


def test_float_literal_goes_to_data_section(fragments):
    compiler = Compiler("2.0", fragments)
    output = compiler.compile()
    assert compiler.result_type is DataType.FLOAT
    assert "float_var_0: .double 2.0\n" in output
    assert "\tmovsd float_var_0(%rip), %xmm0\n" in output
    assert 'float_format: .asciz "%f"' in output
    data_part, text_part = output.split(".section .text")
    assert "float_var_0: .double" in data_part
    assert "push $" not in text_part


def test_float_labels_are_numbered_in_order(fragments):
    output = compile_expression("2.0+1.0+3.0", fragments)
    positions = [output.index(f"float_var_{i}: .double") for i in range(3)]
    assert positions == sorted(positions)
    assert "float_var_3" not in output


def test_precedence_emits_multiplication_before_addition(fragments):
    output = compile_expression("10/5+3*2", fragments)
    assert output.index("idiv %rbx") < output.index("imul %rbx, %rax")
    assert output.index("imul %rbx, %rax") < output.index("add %rbx, %rax")


def test_brackets_are_evaluated_first(fragments):
    output = compile_expression("2*(3+8)", fragments)
    assert output.index("add %rbx, %rax") < output.index("imul %rbx, %rax")


def test_mixed_operands_convert_int_to_float(fragments):
    compiler = Compiler("1+2.0", fragments)
    output = compiler.compile()
    assert compiler.result_type is DataType.FLOAT
    assert "cvtsi2sd %rax, %xmm0" in output
    assert "movsd (%rsp), %xmm1" in output
    assert "addsd %xmm1, %xmm0" in output


def test_integer_division_before_float_multiplication(fragments):
    compiler = Compiler("1 / 3 * 3.0", fragments)
    output = compiler.compile()
    assert compiler.result_type is DataType.FLOAT
    assert output.index("idiv %rbx") < output.index("mulsd %xmm1, %xmm0")
    assert "divsd" not in output


def test_whitespace_does_not_change_code(fragments):
    spaced = compile_expression("10 / 5 +3*  2-11 + 5", fragments)
    compact = compile_expression("10/5+3*2-11+5", fragments)
    strip = lambda text: "\n".join(
        line for line in text.splitlines() if "# Evaluating:" not in line
    )
    assert strip(spaced) == strip(compact)


def test_trailing_input_is_ignored(fragments):
    output = compile_expression("1 2", fragments)
    assert "push $1\t" in output
    assert "push $2" not in output


def test_missing_closing_bracket_raises(fragments):
    with pytest.raises(CompileError, match=r"expected \)"):
        compile_expression("(1+2", fragments)


@pytest.mark.parametrize("source", ["", "+", "1+", "*3"])
def test_missing_operand_raises(fragments, source):
    with pytest.raises(CompileError):
        compile_expression(source, fragments)


def test_compile_is_repeatable(fragments):
    compiler = Compiler("2.5 + 2.5", fragments)
    first = compiler.compile()
    assert compiler.compile() == first
    assert first.count(".double 2.5") == 2


def test_missing_fragment_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        compile_expression("1", tmp_path)


def test_operator_text_has_single_percent(fragments):
    output = compile_expression("1 * 4 / 2 +6.6 - 9 / (1 + 2)", fragments)
    assert "%%" not in output
    assert "subsd %xmm1, %xmm0" in output