"""Safe arithmetic expressions of a single variable.

Turns user text such as ``"sin(pi*x/2)"`` or ``"exp(-t)"`` into a
``float -> float`` callable usable as an initial or boundary function.

Expressions are parsed with :mod:`ast` and evaluated by walking the tree;
``eval`` is never called on user input. Supported syntax:

- Decimal numbers, the constants ``pi`` and ``e``
- Binary ``+ - * / ** %`` and unary ``+ -``, parentheses
- ``^`` as an alias for ``**``
- Functions ``sin cos tan asin acos atan sinh cosh tanh exp log log10
  sqrt abs deg rad min max``

Names are case-insensitive, so ``PI`` and ``Sin`` are accepted as well.
Trigonometric functions work in radians; ``deg`` and ``rad`` convert.
"""

from __future__ import annotations

import ast
import math
from typing import Callable, Dict

from .exceptions import InvalidParameterError

ScalarFunction = Callable[[float], float]

_CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}

_FUNCTIONS: Dict[str, Callable[..., float]] = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": math.asin,
    "acos": math.acos,
    "atan": math.atan,
    "sinh": math.sinh,
    "cosh": math.cosh,
    "tanh": math.tanh,
    "exp": math.exp,
    "log": math.log,
    "log10": math.log10,
    "sqrt": math.sqrt,
    "abs": abs,
    "deg": math.degrees,
    "rad": math.radians,
    "min": min,
    "max": max,
}

_BINARY_OPS = {
    ast.Add: lambda a, b: a + b,
    ast.Sub: lambda a, b: a - b,
    ast.Mult: lambda a, b: a * b,
    ast.Div: lambda a, b: a / b,
    ast.Pow: lambda a, b: a**b,
    ast.Mod: lambda a, b: a % b,
}


def _check(node: ast.AST, variable: str, text: str) -> None:
    """Reject anything outside the supported grammar before evaluation."""
    if isinstance(node, ast.Expression):
        _check(node.body, variable, text)
    elif isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise InvalidParameterError("expression", text, f"unsupported constant {node.value!r}")
    elif isinstance(node, ast.Name):
        name = node.id.lower()
        if name != variable and name not in _CONSTANTS:
            raise InvalidParameterError(
                "expression", text, f"unknown identifier '{node.id}' (variable is '{variable}')"
            )
    elif isinstance(node, ast.BinOp):
        if type(node.op) not in _BINARY_OPS:
            raise InvalidParameterError("expression", text, "unsupported operator")
        _check(node.left, variable, text)
        _check(node.right, variable, text)
    elif isinstance(node, ast.UnaryOp):
        if not isinstance(node.op, (ast.UAdd, ast.USub)):
            raise InvalidParameterError("expression", text, "unsupported unary operator")
        _check(node.operand, variable, text)
    elif isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id.lower() not in _FUNCTIONS:
            raise InvalidParameterError("expression", text, "unknown function call")
        if node.keywords or not node.args:
            raise InvalidParameterError("expression", text, f"bad arguments to '{node.func.id}'")
        for arg in node.args:
            _check(arg, variable, text)
    else:
        raise InvalidParameterError("expression", text, f"unsupported syntax ({type(node).__name__})")


def _evaluate(node: ast.AST, variable: str, value: float) -> float:
    if isinstance(node, ast.Constant):
        return float(node.value)
    if isinstance(node, ast.Name):
        name = node.id.lower()
        return value if name == variable else _CONSTANTS[name]
    if isinstance(node, ast.BinOp):
        left = _evaluate(node.left, variable, value)
        right = _evaluate(node.right, variable, value)
        try:
            result = _BINARY_OPS[type(node.op)](left, right)
        except ZeroDivisionError:
            raise ValueError("division by zero") from None
        if isinstance(result, complex):
            raise ValueError("result is not a real number")
        return float(result)
    if isinstance(node, ast.UnaryOp):
        operand = _evaluate(node.operand, variable, value)
        return -operand if isinstance(node.op, ast.USub) else operand
    # Only calls are left after _check.
    func = _FUNCTIONS[node.func.id.lower()]
    args = [_evaluate(arg, variable, value) for arg in node.args]
    return float(func(*args))


def parse_function(text: str, variable: str = "x") -> ScalarFunction:
    """
    Compile an expression in one variable into a Python callable.

    Parameters
    ----------
    text:
        Expression source, e.g. ``"sin(pi*x)"``.
    variable:
        Name of the free variable, ``"x"`` for initial data and ``"t"``
        for boundary data.

    Returns
    -------
    Callable[[float], float]
        Function evaluating the expression. Domain errors raised during a
        call (``log(-1)``, division by zero, overflow) surface as
        ``ValueError`` or ``OverflowError``.

    Raises
    ------
    InvalidParameterError
        If the text is empty, has a syntax error, or uses names or
        constructs outside the supported grammar.
    """
    variable = variable.lower()
    source = text.strip().replace("^", "**")
    if not source:
        raise InvalidParameterError("expression", text, "empty expression")
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as exc:
        raise InvalidParameterError("expression", text, f"syntax error: {exc.msg}") from None
    _check(tree, variable, text)
    body = tree.body

    def function(value: float) -> float:
        return _evaluate(body, variable, float(value))

    function.__name__ = f"expr_{variable}"
    function.__doc__ = f"{variable} -> {text.strip()}"
    return function


__all__ = ["ScalarFunction", "parse_function"]
