"""
Shelfcache — Validation Decorators

Applies Pydantic validation to MCP tool inputs and turns failures into
structured error responses instead of exceptions.
"""

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from ..errors import ErrorCode, make_error_response

logger = logging.getLogger(__name__)


def validate_input(
    schema: type[BaseModel],
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """
    Decorator to validate keyword inputs of an async tool using a Pydantic schema.

    Positional arguments (such as the cache manager) pass through untouched;
    keyword arguments are validated and replaced by the validated values.

    Error Response:
        {
            "success": False,
            "error_code": "INVALID_INPUT",
            "message": "Input validation failed",
            "details": {
                "validation_errors": [
                    {"field": "key", "message": "String should have at least 1 character", "type": "string_too_short"}
                ],
                "tool": "cache_get"
            }
        }
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                validated = schema(**kwargs)
            except ValidationError as e:
                validation_errors = [
                    {
                        "field": " -> ".join(str(loc) for loc in error["loc"]),
                        "message": error["msg"],
                        "type": error["type"],
                    }
                    for error in e.errors()
                ]

                logger.warning(
                    f"Input validation failed for {func.__name__}",
                    extra={"tool": func.__name__, "validation_errors": validation_errors},
                )

                return make_error_response(
                    error_code=ErrorCode.INVALID_INPUT,
                    message="Input validation failed",
                    context={"validation_errors": validation_errors, "tool": func.__name__},
                )

            return await func(*args, **validated.model_dump())

        return wrapper

    return decorator
