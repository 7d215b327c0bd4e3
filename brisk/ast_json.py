"""JSON serialization/deserialization for Brisk AST.

This module converts between Brisk AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Source positions are
kept so that runtime errors of a reloaded program still point at the
original script.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Program,
    Block,
    PrintStmt,
    InputStmt,
    Assign,
    IfStmt,
    WhileStmt,
    BreakStmt,
    ExprStmt,
    NumberLiteral,
    StringLiteral,
    BoolLiteral,
    Ident,
    BinaryOp,
    UnaryOp,
    CompoundAssign,
)


def _pos(node: Any) -> Dict[str, Any]:
    return {"line": node.line, "column": node.column}


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    # Statements
    if isinstance(node, Program):
        return {"type": "Program", "body": [ast_to_obj(n) for n in node.body]}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "expr": ast_to_obj(node.expr), **_pos(node)}
    if isinstance(node, InputStmt):
        return {"type": "InputStmt", "name": node.name, **_pos(node)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value), **_pos(node)}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_block": ast_to_obj(node.then_block),
            "else_block": ast_to_obj(node.else_block),
            **_pos(node),
        }
    if isinstance(node, WhileStmt):
        return {
            "type": "WhileStmt",
            "condition": ast_to_obj(node.condition),
            "body": ast_to_obj(node.body),
            **_pos(node),
        }
    if isinstance(node, BreakStmt):
        return {"type": "BreakStmt", **_pos(node)}
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr), **_pos(node)}

    # Expressions
    if isinstance(node, NumberLiteral):
        return {"type": "NumberLiteral", "value": node.value}
    if isinstance(node, StringLiteral):
        return {"type": "StringLiteral", "value": node.value}
    if isinstance(node, BoolLiteral):
        return {"type": "BoolLiteral", "value": node.value}
    if isinstance(node, Ident):
        return {"type": "Ident", "name": node.name, **_pos(node)}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_obj(node.operand)}
    if isinstance(node, CompoundAssign):
        return {
            "type": "CompoundAssign",
            "name": node.name,
            "op": node.op,
            "value": ast_to_obj(node.value),
            **_pos(node),
        }

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    line = obj.get("line")
    column = obj.get("column")
    if t == "Program":
        return Program(body=tuple(ast_from_obj(n) for n in obj["body"]))
    if t == "Block":
        return Block(statements=tuple(ast_from_obj(s) for s in obj["statements"]))
    if t == "PrintStmt":
        return PrintStmt(expr=ast_from_obj(obj["expr"]), line=line, column=column)
    if t == "InputStmt":
        return InputStmt(name=obj["name"], line=line, column=column)
    if t == "Assign":
        return Assign(name=obj["name"], value=ast_from_obj(obj["value"]), line=line, column=column)
    if t == "IfStmt":
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_block=ast_from_obj(obj["then_block"]),
            else_block=ast_from_obj(obj.get("else_block")),
            line=line,
            column=column,
        )
    if t == "WhileStmt":
        return WhileStmt(
            condition=ast_from_obj(obj["condition"]),
            body=ast_from_obj(obj["body"]),
            line=line,
            column=column,
        )
    if t == "BreakStmt":
        return BreakStmt(line=line, column=column)
    if t == "ExprStmt":
        return ExprStmt(expr=ast_from_obj(obj["expr"]), line=line, column=column)
    if t == "NumberLiteral":
        value = obj["value"]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"NumberLiteral value must be a number, got {value!r}")
        return NumberLiteral(value=float(value))
    if t == "StringLiteral":
        if not isinstance(obj["value"], str):
            raise ValueError(f"StringLiteral value must be a string, got {obj['value']!r}")
        return StringLiteral(value=obj["value"])
    if t == "BoolLiteral":
        if not isinstance(obj["value"], bool):
            raise ValueError(f"BoolLiteral value must be true or false, got {obj['value']!r}")
        return BoolLiteral(value=obj["value"])
    if t == "Ident":
        return Ident(name=obj["name"], line=line, column=column)
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "UnaryOp":
        return UnaryOp(op=obj["op"], operand=ast_from_obj(obj["operand"]))
    if t == "CompoundAssign":
        return CompoundAssign(
            name=obj["name"],
            op=obj["op"],
            value=ast_from_obj(obj["value"]),
            line=line,
            column=column,
        )

    raise ValueError(f"Unknown AST node type: {t}")
