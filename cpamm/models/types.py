"""Shared type definitions for pool boundary models."""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from cpamm.constants import UINT256_MAX


def validate_uint256(value: Any) -> int:
    """Validate that a value is a non-negative integer within uint256.

    Accepts ints and decimal strings (JSON snapshots carry large amounts as
    strings to survive JavaScript consumers).

    Raises:
        ValueError: If value is not a valid non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")

    return value


# 256-bit unsigned integer (int, or decimal string on input)
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]

# Asset or holder identifier; any non-empty string
Identity = Annotated[str, Field(min_length=1)]
