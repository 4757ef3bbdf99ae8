"""
Result Monad & Error Types: Exception-Free Control Flow

Fallible forest operations (building, querying, id lookups) return a
Result[T, E] instead of raising. Callers branch on is_ok()/is_err() or
unwrap() when a failure is a programming error.

Error values are frozen dataclasses carrying an ErrorCode, a human-readable
message and machine-readable details, so they can be logged as structured
fields without further formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import (
    Any,
    Callable,
    Generic,
    Literal,
    NoReturn,
    Optional,
    TypeVar,
    Union,
    final,
)


# =============================================================================
# TYPE VARIABLES
# =============================================================================
T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transform result type


# =============================================================================
# RESULT MONAD: SUCCESS VARIANT
# =============================================================================
@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Success variant of Result.

    Immutable after construction, so an Ok holding a built index can be
    handed to any number of query threads.

    Example:
        result = construct_index(5, 1, vectors, ids)
        if result.is_ok():
            index = result.unwrap()
    """
    _value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        """Extract the wrapped value."""
        return self._value

    def unwrap_or(self, default: T) -> T:
        return self._value

    def unwrap_or_else(self, f: Callable[[], T]) -> T:
        return self._value

    def expect(self, msg: str) -> T:
        return self._value

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        """
        Apply a transformation to the success value.

        Example:
            Ok(5).map(lambda x: x * 2)  # Ok(10)
        """
        return Ok(fn(self._value))

    def map_err(self, fn: Callable[[Any], Any]) -> "Ok[T]":
        return self

    def and_then(self, fn: Callable[[T], "Result[U, Any]"]) -> "Result[U, Any]":
        """Chain another fallible operation on the success value."""
        return fn(self._value)

    @property
    def value(self) -> T:
        return self._value

    @property
    def error(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Ok({self._value!r})"

    def __bool__(self) -> Literal[True]:
        return True


# =============================================================================
# RESULT MONAD: ERROR VARIANT
# =============================================================================
@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Error variant of Result.

    Example:
        result = construct_index(0, 1, vectors, ids)
        if result.is_err():
            print(result.error.code)  # ErrorCode.CONFIG_INVALID
    """
    _error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> NoReturn:
        """
        Unwrapping an error is a programming error.

        Raises:
            RuntimeError: Always, with the error context
        """
        raise RuntimeError(f"Called unwrap() on Err: {self._error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[], T]) -> T:
        return f()

    def expect(self, msg: str) -> NoReturn:
        raise RuntimeError(f"{msg}: {self._error}")

    def map(self, fn: Callable[[Any], U]) -> "Err[E]":
        return self

    def map_err(self, fn: Callable[[E], U]) -> "Err[U]":
        return Err(fn(self._error))

    def and_then(self, fn: Callable[[Any], "Result[U, E]"]) -> "Err[E]":
        return self

    @property
    def value(self) -> None:
        return None

    @property
    def error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Err({self._error!r})"

    def __bool__(self) -> Literal[False]:
        return False


# Union type for pattern matching
Result = Union[Ok[T], Err[E]]


# =============================================================================
# ERROR TAXONOMY
# =============================================================================
class ErrorCode(Enum):
    """
    Canonical error codes.

    Ranges:
        1000-1999: Index construction / lookup errors
        2000-2999: Query errors
        5000-5999: Configuration errors
    """
    # Index errors (1000-1999)
    INDEX_DIMENSION_MISMATCH = 1004
    INDEX_LENGTH_MISMATCH = 1006
    INDEX_ID_NOT_FOUND = 1007
    INDEX_INVALID_VECTOR = 1008

    # Query errors (2000-2999)
    QUERY_INVALID_VECTOR = 2001

    # Configuration errors (5000-5999)
    CONFIG_INVALID = 5001


@dataclass(frozen=True, slots=True)
class AnnForestError:
    """
    Base error type for all forest operations.

    Attributes:
        code: Error category
        message: Human-readable description
        details: Machine-readable context (parameter names, sizes, ...)
        timestamp: When the error was created (UTC)
    """
    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging."""
        return {
            "code": self.code.value,
            "code_name": self.code.name,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


# =============================================================================
# SPECIALIZED ERROR TYPES (Convenience constructors)
# =============================================================================
class ConfigError(AnnForestError):
    """Invalid build configuration, reported before any work starts."""

    @classmethod
    def invalid(cls, param: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Invalid config '{param}': {reason}",
            details={"param": param, "value": value, "reason": reason},
        )

    @classmethod
    def from_message(cls, message: str) -> "ConfigError":
        return cls(code=ErrorCode.CONFIG_INVALID, message=message)


class BuildError(AnnForestError):
    """Input data that cannot be indexed as given."""

    @classmethod
    def length_mismatch(cls, num_vectors: int, num_ids: int) -> "BuildError":
        return cls(
            code=ErrorCode.INDEX_LENGTH_MISMATCH,
            message=f"Got {num_vectors} vectors but {num_ids} ids",
            details={"num_vectors": num_vectors, "num_ids": num_ids},
        )

    @classmethod
    def dimension_mismatch(cls, expected: int, actual: int, position: int) -> "BuildError":
        return cls(
            code=ErrorCode.INDEX_DIMENSION_MISMATCH,
            message=(
                f"Dimension mismatch at position {position}: "
                f"expected {expected}, got {actual}"
            ),
            details={"expected": expected, "actual": actual, "position": position},
        )

    @classmethod
    def invalid_vector(cls, position: int, reason: str) -> "BuildError":
        return cls(
            code=ErrorCode.INDEX_INVALID_VECTOR,
            message=f"Invalid vector at position {position}: {reason}",
            details={"position": position, "reason": reason},
        )

    @classmethod
    def id_not_found(cls, vector_id: Any) -> "BuildError":
        return cls(
            code=ErrorCode.INDEX_ID_NOT_FOUND,
            message=f"Vector id {vector_id!r} not found",
            details={"id": repr(vector_id)},
        )


class QueryError(AnnForestError):
    """Error during query/search operations."""

    @classmethod
    def invalid_vector(cls, reason: str) -> "QueryError":
        return cls(
            code=ErrorCode.QUERY_INVALID_VECTOR,
            message=f"Invalid query vector: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def dimension_mismatch(cls, expected: int, actual: int) -> "QueryError":
        return cls(
            code=ErrorCode.QUERY_INVALID_VECTOR,
            message=f"Invalid query vector: expected dimension {expected}, got {actual}",
            details={"expected": expected, "actual": actual},
        )
