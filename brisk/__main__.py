"""CLI entry point for the Brisk interpreter.

Usage:
    python -m brisk [-v|-vv|-vvv|-vvvv] [--parser descent|grammar] <script>
    python -m brisk [-v...] --emit-ast <script>
    python -m brisk [-v...] --ast <ast_json_file>
    python -m brisk --tokens <script>

Options:
  -v                Increase debug verbosity (can be repeated)
  --parser          Front end used to parse the script (default: descent)
  --max-iterations  Abort once while loops have run this many iterations
  --emit-ast        Parse the given .brisk file and emit an AST JSON file
  --ast             Execute a previously emitted AST JSON file
  --tokens          Print the tokens of the given .brisk file, one per line

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast_json import ast_to_obj, ast_from_obj
from .errors import BriskError
from .interpreter import FRONT_ENDS, Interpreter, parse_source
from .lexer import render_token, tokenize


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(prog='brisk', description="Brisk language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--parser', choices=sorted(FRONT_ENDS), default='descent',
                        help='front end used to parse the script')
    parser.add_argument('--max-iterations', type=int, default=None, metavar='N',
                        help='abort after N while-loop iterations')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='BRISK_FILE', help='emit AST JSON for the given .brisk file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--tokens', metavar='BRISK_FILE', help='print the tokens of the given .brisk file')
    parser.add_argument('program', nargs='?', help='Brisk script (.brisk) to execute')
    args = parser.parse_args(argv)

    try:
        # Token dump mode
        if args.tokens:
            source = read_source(Path(args.tokens))
            for token in tokenize(source):
                if token.type != 'EOF':
                    print(f"{token.line}:{token.column}\t{token.type}\t{render_token(token)}")
            return

        # Emit AST mode
        if args.emit_ast:
            program_file = Path(args.emit_ast)
            ast_program = parse_source(read_source(program_file), args.parser)
            obj = ast_to_obj(ast_program)
            out_path = program_file.with_name(program_file.name + '.ast.json')
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(obj, out, ensure_ascii=False, indent=2)
            print(str(out_path))
            return

        # Execute from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            if not ast_path.exists():
                print(f"Error: file {ast_path} not found", file=sys.stderr)
                sys.exit(1)
            try:
                with open(ast_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                ast_program = ast_from_obj(data)
            except (ValueError, KeyError, TypeError) as e:
                # json.JSONDecodeError is a ValueError
                print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
                sys.exit(1)
        else:
            # Default: execute source file
            if not args.program:
                parser.error('missing program file; or use --emit-ast/--ast/--tokens')
            ast_program = parse_source(read_source(Path(args.program)), args.parser)

        interpreter = Interpreter(debug_level=args.v, max_iterations=args.max_iterations)
        interpreter.run(ast_program)
    except BriskError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
