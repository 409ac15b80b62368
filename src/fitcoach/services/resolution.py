"""Ordered lookup strategies with typed results."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")
K = TypeVar("K")

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found(Generic[T]):
    """The lookup produced a value."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """The lookup ran but has nothing for the key."""

    reason: str = ""


@dataclass(frozen=True)
class Failed:
    """The lookup errored."""

    error: Exception
    code: str | None = None


LookupResult = Found | NotFound | Failed


@dataclass(frozen=True)
class Resolution(Generic[T]):
    """Outcome of a resolution chain."""

    value: T | None
    source: str
    failures: dict[str, Failed] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.value is not None


@dataclass
class ResolutionChain(Generic[K, T]):
    """Try named strategies in order until one finds a value."""

    strategies: list[tuple[str, Callable[[K], LookupResult]]]
    default: T | None = None

    def resolve(self, key: K) -> Resolution[T]:
        """Run the strategies for a key and return the first hit."""
        failures: dict[str, Failed] = {}
        for name, strategy in self.strategies:
            result = strategy(key)
            if isinstance(result, Found):
                return Resolution(value=result.value, source=name, failures=failures)
            if isinstance(result, Failed):
                _logger.warning(
                    "Resolution strategy %s failed for %s (code=%s): %s",
                    name,
                    key,
                    result.code,
                    result.error,
                )
                failures[name] = result
        if self.default is not None:
            return Resolution(value=self.default, source="default", failures=failures)
        return Resolution(value=None, source="none", failures=failures)
