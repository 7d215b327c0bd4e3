import pytest

from brisk.ast import Block, BoolLiteral, BreakStmt, NumberLiteral, PrintStmt, Program, UnaryOp, WhileStmt
from brisk.errors import (
    DivisionByZero, EvalError, IterationLimitExceeded, OperandTypeError, ParseError, UndefinedVariable,
    UnexpectedEndOfInput,
)
from brisk.interpreter import Interpreter, parse_source, run_program
from brisk.streams import LineBuffer


def run(source, inputs=(), **options):
    streams = LineBuffer(inputs)
    interp = run_program(source, input_stream=streams, output_stream=streams, **options)
    return streams.output, interp


def value_of(expr_source):
    output, _ = run(f'print({expr_source})')
    return output[0]


@pytest.mark.parametrize('expr, expected', [
    ('1 + 2 * 3', 1 + 2 * 3),
    ('(1 + 2) * 3', (1 + 2) * 3),
    ('10 - 4 - 3', 10 - 4 - 3),
    ('100 / 10 / 5', 100 / 10 / 5),
    ('2 * (3 + 4) / 7 - 1', 2 * (3 + 4) / 7 - 1),
    ('1 / 3', 1 / 3),
    ('0.1 + 0.2', 0.1 + 0.2),
])
def test_arithmetic_matches_float_arithmetic(expr, expected):
    _, interp = run(f'result = {expr}')
    assert interp.env.get('result') == expected


def test_number_display():
    assert value_of('3') == '3'
    assert value_of('7 / 2') == '3.5'
    assert value_of('1 / 4') == '0.25'
    assert value_of('0 - 2.5') == '-2.5'
    assert value_of('1000000 * 1000000 * 1000000 * 1000') == '1000000000000000000000'


def test_bool_display():
    assert value_of('1 < 2') == 'true'
    assert value_of('1 > 2') == 'false'


def test_string_concatenation():
    assert value_of('"a" + "b"') == 'ab'
    assert value_of('"a" + 1') == 'a1'
    assert value_of('1 + "a"') == '1a'
    assert value_of('"n=" + 2.5') == 'n=2.5'
    # associative, not commutative
    assert value_of('("x" + "y") + "z"') == value_of('"x" + ("y" + "z")')
    assert value_of('"a" + 1') != value_of('1 + "a"')


def test_plus_rejects_bools():
    with pytest.raises(OperandTypeError):
        run('print("a" + true)')
    with pytest.raises(OperandTypeError):
        run('print(1 + (1 < 2))')


@pytest.mark.parametrize('op', ['-', '*', '/', '%', '<', '<=', '>', '>='])
def test_numeric_operators_reject_strings(op):
    with pytest.raises(OperandTypeError) as excinfo:
        run(f'x = "a" {op} 1')
    assert excinfo.value.err.name == 'TypeError'


def test_equality():
    assert value_of('1 == 1') == 'true'
    assert value_of('"a" == "a"') == 'true'
    assert value_of('(1 < 2) == (2 < 3)') == 'true'
    assert value_of('1 != 2') == 'true'
    # different kinds are never equal and never an error
    assert value_of('1 == "1"') == 'false'
    assert value_of('1 != "1"') == 'true'
    assert value_of('(1 == 1) == 1') == 'false'


def test_logical_operators():
    assert value_of('true && false') == 'false'
    assert value_of('true || false') == 'true'
    assert value_of('!false') == 'true'
    with pytest.raises(OperandTypeError):
        run('print(1 && true)')
    with pytest.raises(OperandTypeError):
        run('print(!1)')


def test_unary_minus():
    assert value_of('-3 + 1') == '-2'
    with pytest.raises(OperandTypeError):
        run('print(-"a")')


def test_remainder_truncates_toward_zero():
    assert value_of('7 % 3') == '1'
    assert value_of('(0 - 7) % 3') == '-1'
    assert value_of('7.5 % 2') == '1.5'


@pytest.mark.parametrize('source', ['x = 1 / 0', 'x = 1 % 0', 'x = 5 x /= 0', 'x = 1 / (2 - 2)'])
def test_division_by_zero(source):
    with pytest.raises(DivisionByZero):
        run(source)


def test_compound_assign_updates_and_yields():
    output, interp = run('x = 1 print(x += 1) print(x += 1) print(x)')
    assert output == ['2', '3', '3']
    assert interp.env.get('x') == 3.0


def test_compound_assign_on_strings():
    output, _ = run('s = "ab" s += "c" s += 1 print(s)')
    assert output == ['abc1']


def test_compound_assign_requires_binding():
    with pytest.raises(UndefinedVariable) as excinfo:
        run('y += 1')
    assert 'y' in excinfo.value.message


def test_undefined_variable_is_never_defaulted():
    with pytest.raises(UndefinedVariable) as excinfo:
        run('print(nope)')
    assert excinfo.value.err.name == 'UndefinedVariable'
    assert 'nope' in excinfo.value.message


def test_assignment_overwrites_and_changes_kind():
    output, _ = run('x = 1 x = "one" print(x)')
    assert output == ['one']


def test_blocks_share_global_environment():
    output, interp = run('if (true) { inner = 5 } print(inner)')
    assert output == ['5']
    assert 'inner' in interp.env


def test_if_requires_bool():
    with pytest.raises(OperandTypeError) as excinfo:
        run('if (1) { print("no") }')
    assert 'Bool' in excinfo.value.message


def test_while_requires_bool():
    with pytest.raises(OperandTypeError):
        run('while ("yes") { }')


def test_else_branch():
    output, _ = run('if (1 > 2) { print("then") } else { print("else") }')
    assert output == ['else']


def test_if_without_else_does_nothing_when_false():
    output, _ = run('if (1 > 2) { print("then") }')
    assert output == []


def test_nested_loops_and_break():
    source = '''
    i = 0
    while (i < 3) {
        i += 1
        j = 0
        while (true) {
            j += 1
            if (j == 2) { break }
        }
        print(i + ":" + j)
    }
    '''
    output, _ = run(source)
    assert output == ['1:2', '2:2', '3:2']


def test_infinite_loop_is_bounded_by_harness():
    with pytest.raises(IterationLimitExceeded):
        run('n = 0 while (true) { n += 1 }', max_iterations=50)


def test_iteration_limit_not_hit_by_finite_loop():
    output, interp = run('n = 0 while (n < 50) { n += 1 } print(n)', max_iterations=50)
    assert output == ['50']
    assert interp.iterations == 50


def test_input_binds_string():
    output, interp = run('input a input b print(a + b)', inputs=['1', '2'])
    assert output == ['12']
    assert interp.env.get('a') == '1'


def test_input_at_end_of_stream():
    with pytest.raises(UnexpectedEndOfInput) as excinfo:
        run('input a', inputs=[])
    assert (excinfo.value.line, excinfo.value.column) == (1, 1)


def test_output_before_error_is_kept():
    streams = LineBuffer()
    with pytest.raises(DivisionByZero):
        run_program('print("one") print("two") print(1 / 0)', output_stream=streams)
    assert streams.output == ['one', 'two']


def test_runtime_error_reports_statement_position():
    with pytest.raises(OperandTypeError) as excinfo:
        run('x = 1\n\n   y = x - "a"')
    assert excinfo.value.line == 3
    assert excinfo.value.column == 4
    assert str(excinfo.value).startswith('Runtime error: TypeError:')


def test_each_run_starts_with_fresh_environment():
    streams = LineBuffer()
    interp = Interpreter(output_stream=streams)
    interp.run(parse_source('x = 1'))
    with pytest.raises(UndefinedVariable):
        interp.run(parse_source('print(x)'))


def test_independent_interpreters():
    first = LineBuffer()
    second = LineBuffer()
    run_program('x = "first" print(x)', output_stream=first)
    run_program('x = "second" print(x)', output_stream=second)
    assert first.output == ['first']
    assert second.output == ['second']


def test_stray_break_in_hand_built_tree():
    program = Program((BreakStmt(),))
    with pytest.raises(EvalError) as excinfo:
        Interpreter(output_stream=LineBuffer()).run(program)
    assert excinfo.value.err.name == 'BreakOutsideLoop'


def test_break_in_hand_built_loop():
    program = Program((WhileStmt(BoolLiteral(True), Block((BreakStmt(),))),))
    Interpreter(output_stream=LineBuffer()).run(program)


def test_debug_trace(tmp_path):
    trace = tmp_path / 'trace.txt'
    streams = LineBuffer()
    run_program('x = 2 if (x > 1) { print(x) }', output_stream=streams,
                debug_level=4, debug_file=str(trace))
    lines = trace.read_text(encoding='utf-8').splitlines()
    assert lines[0] == 'run: 2 top-level statements'
    assert "assign x: Number = '2'" in lines
    assert 'if condition -> true' in lines
    assert "print '2'" in lines
    assert lines[-1] == 'finished: 1 variables bound'


def test_no_trace_file_without_debug(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    run('x = 1')
    assert not (tmp_path / 'debug.txt').exists()


def test_unknown_parser_name():
    with pytest.raises(ValueError):
        parse_source('x = 1', parser='yacc')


def test_power():
    assert value_of('2 ^ 10') == '1024'
    assert value_of('2 ^ 3 ^ 2') == '512'
    assert value_of('-2 ^ 2') == '-4'
    assert value_of('4 ^ 0.5') == '2'
    assert value_of('2 ^ -1') == '0.5'
    assert value_of('0 ^ 0') == '1'


def test_power_outside_real_range():
    assert value_of('(0 - 8) ^ 0.5') == 'NaN'
    assert value_of('10 ^ 400') == 'inf'
    assert value_of('(0 - 10) ^ 401') == '-inf'
    with pytest.raises(DivisionByZero):
        run('x = 0 ^ -1')


def test_power_rejects_non_numbers():
    with pytest.raises(OperandTypeError):
        run('x = "a" ^ 2')
    with pytest.raises(OperandTypeError):
        run('x = 2 ^ true')


def test_deep_parentheses_are_a_parse_error():
    with pytest.raises(ParseError) as excinfo:
        run('print(' + '(' * 500 + '1' + ')' * 500 + ')')
    assert excinfo.value.err.name == 'NestingTooDeep'


def test_deep_tree_is_a_runtime_error():
    expr = NumberLiteral(1.0)
    for _ in range(5000):
        expr = UnaryOp('-', expr)
    streams = LineBuffer()
    with pytest.raises(EvalError) as excinfo:
        Interpreter(output_stream=streams).run(Program((PrintStmt(expr),)))
    assert excinfo.value.err.name == 'NestingTooDeep'
    assert streams.output == []


def test_debug_trace_for_every_run(tmp_path):
    trace = tmp_path / 'trace.txt'
    interp = Interpreter(output_stream=LineBuffer(), debug_level=2, debug_file=str(trace))
    interp.run(parse_source('first = 1'))
    assert "assign first: Number = '1'" in trace.read_text(encoding='utf-8')
    interp.run(parse_source('second = 2'))
    text = trace.read_text(encoding='utf-8')
    assert "assign second: Number = '2'" in text
    assert text.splitlines()[-1] == 'finished: 1 variables bound'
