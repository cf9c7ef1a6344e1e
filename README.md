# exprasm

`exprasm` is a small compiler that turns an arithmetic expression such as
`1 * 4 / 2 + 6.6 - 9 / (1 + 2)` into x86-64 assembly in AT&T syntax.

The language it accepts:

- integer literals (`42`) and floating-point literals (`2.5`);
- the operators `+`, `-`, `*` and `/`, with the usual precedence;
- parentheses for grouping;
- spaces between tokens.

An operation whose operands are both integers uses integer instructions,
so division truncates (`1 / 3 * 3.0` gives `0`). As soon as a floating-point
operand takes part in an operation, the result of that operation is a double,
and integer operands are converted before use.

Parsing stops at the first character that cannot continue the expression;
anything after it is not compiled.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install .[test]
pytest
```

## Using the compiler from Python

```python
from exprasm.compiler import compile_expression

assembly = compile_expression("2 * (3 + 8)", "fragments")
print(assembly)
```

`compile_expression(source, fragment_dir=".")` takes the expression and the
directory that holds the assembly fragments the generated program ends with.
The result is a complete assembly file: a `.data` section holding the
floating-point constants, followed by a `.text` section with a `main` routine
that evaluates the expression on the stack.

The fragment directory must contain:

- `fragment-sectiondata-int-out.s`: appended to the data section when the result is an integer;
- `fragment-sectiondata-float-out.s`: appended to the data section when the result is a double;
- `fragment-main-out.s`: appended to the code after the evaluation.

Fragments are read in printf style: every `%%` in them becomes `%`.

The same work is available through the `Compiler` class:

```python
from exprasm.compiler import Compiler, DataType

compiler = Compiler("2.5 + 2.5", "fragments")
assembly = compiler.compile()
assert compiler.result_type is DataType.FLOAT
```

After `compile()`, `result_type` holds the type of the expression's value, a
`DataType` member (`INT` or `FLOAT`).

A malformed expression raises `CompileError` (a `ValueError`): an opening
parenthesis without its closing one, or a place where a number or `(` is
expected but something else, or the end of the input, is found.

## Checking compiled programs end to end

The `exprasm` command compiles a fixed set of sample expressions, writes each
to `compiled-files/compiled_assembly-<n>.s`, assembles it with `gcc` into
`assembled_machine_code.exe`, runs that program, reads the number it wrote to
`output.txt`, and compares it with the expected value:

```
exprasm
exprasm --workdir path/to/dir
```

`--workdir` (default: the current directory) is where the fragment files are
looked for and where the compiled files, the executable and `output.txt` live.
The machine needs a `gcc` that targets x86-64. The command reports each case as
passed or failed and closes with a count of failures; its exit status is 0
either way.

The pieces are also usable on their own from `exprasm.controller`:

- `write_compiled_to_file(compiled, file_index, directory="compiled-files")`
  writes the assembly, creating the directory if needed, and returns the path;
- `read_output(path="output.txt")` returns the text the program wrote;
- `run_case(expression, expected, file_index, workdir=".")` does one full
  round and returns a `CaseResult` with `expression`, `expected`, `actual`,
  `output` and a `passed` property.

## What it does not do

- The fragment files are not part of the package; you supply them.
- There is no command to compile a single expression of your choosing; the
  `exprasm` command runs only its fixed sample set. Use `compile_expression`
  for your own expressions.
- Negative literals, unary minus and operators other than `+ - * /` are not
  supported.