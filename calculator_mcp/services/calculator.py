"""
Arithmetic core.

Shared by the MCP ``tools/call`` handler and the ``/calculate`` endpoint so
both paths validate and compute identically.
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, ValidationError

from ..errors import DivideByZero, InvalidArguments

# bool is rejected: StrictInt does not accept True/False
Number = Union[StrictInt, StrictFloat]


class Operation(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


# Operation -> (noun used in the summary text, implementation)
_OPERATIONS: Dict[Operation, Tuple[str, Callable[[Any, Any], Any]]] = {
    Operation.ADD: ("sum", operator.add),
    Operation.SUBTRACT: ("difference", operator.sub),
    Operation.MULTIPLY: ("product", operator.mul),
    Operation.DIVIDE: ("quotient", operator.truediv),
}


class BasicArguments(BaseModel):
    """Arguments of the single-operation tools."""

    model_config = ConfigDict(allow_inf_nan=False)

    a: Number
    b: Number


class SuperCalculatorArguments(BasicArguments):
    """Arguments of the combined calculator."""

    operation: Operation


class CalculateRequest(BasicArguments):
    """Body of ``POST /calculate``. The operation defaults to addition."""

    operation: Operation = Operation.ADD


# ============================================
# JSON schemas advertised through tools/list
# ============================================

_NUMBER_PROPERTIES = {
    "a": {"type": "number", "description": "The first number"},
    "b": {"type": "number", "description": "The second number"},
}

BASIC_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": dict(_NUMBER_PROPERTIES),
    "required": ["a", "b"],
    "additionalProperties": False,
}

SUPER_CALCULATOR_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        **_NUMBER_PROPERTIES,
        "operation": {
            "type": "string",
            "enum": [op.value for op in Operation],
            "description": "The operation to perform",
        },
    },
    "required": ["a", "b", "operation"],
    "additionalProperties": False,
}


@dataclass(frozen=True)
class Calculation:
    """Outcome of one arithmetic operation."""

    operation: Operation
    a: Union[int, float]
    b: Union[int, float]
    result: Union[int, float]

    @property
    def noun(self) -> str:
        return _OPERATIONS[self.operation][0]

    def summary(self) -> str:
        """e.g. ``The quotient of 10 and 4 is 2.5.``"""
        return (
            f"The {self.noun} of {format_number(self.a)} and {format_number(self.b)}"
            f" is {format_number(self.result)}."
        )


def format_number(value: Union[int, float]) -> str:
    """
    Render a number the way the widget host (JavaScript) prints it.

    ``2.0`` -> ``2``, ``0.00001`` -> ``0.00001``, ``1e21`` -> ``1e+21``,
    ``1.5e-8`` -> ``1.5e-8``.
    """
    if isinstance(value, int) and abs(value) < 1e21:
        return str(value)
    value = float(value)
    if value == 0:
        return "0"
    if 1e-6 <= abs(value) < 1e21:
        if value.is_integer():
            return str(int(value))
        text = repr(value)
        if "e" in text:
            # repr switches to exponent form below 1e-4
            return format(Decimal(text), "f")
        return text
    mantissa, exponent = repr(value).split("e")
    exponent = int(exponent)
    return f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"


def compute(operation: Operation, a: Union[int, float], b: Union[int, float]) -> Calculation:
    """
    Apply ``operation`` to ``a`` and ``b``.

    Division by zero is rejected before dividing; the result is never
    Infinity or NaN.

    Raises:
        DivideByZero: ``operation`` is division and ``b`` is zero.
        InvalidArguments: an operand or the result does not fit in a
            finite float.
    """
    if operation is Operation.DIVIDE and b == 0:
        raise DivideByZero()
    _, implementation = _OPERATIONS[operation]
    try:
        result = implementation(a, b)
        finite = all(math.isfinite(x) for x in (a, b, result))
    except OverflowError as e:
        raise InvalidArguments("Result is out of range") from e
    if not finite:
        raise InvalidArguments("Result is out of range")
    return Calculation(operation=operation, a=a, b=b, result=result)


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
        problems.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "Invalid arguments: " + "; ".join(problems)


def parse_tool_arguments(
    tool_id: str, arguments: Optional[Mapping[str, Any]], combined: bool
) -> Tuple[Operation, BasicArguments]:
    """
    Validate tool arguments and resolve the operation to run.

    For the combined calculator the operation comes from the arguments;
    for the other tools it is the tool id itself.
    """
    model = SuperCalculatorArguments if combined else BasicArguments
    try:
        parsed = model.model_validate(dict(arguments or {}))
    except ValidationError as e:
        raise InvalidArguments(_describe_validation_error(e)) from e

    if combined:
        return parsed.operation, parsed
    try:
        return Operation(tool_id), parsed
    except ValueError as e:
        raise InvalidArguments(f"Tool {tool_id} has no arithmetic operation") from e
