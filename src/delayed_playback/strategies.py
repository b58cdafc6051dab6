"""Delay strategies mapping each element to the time it waits before display."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sized
import math
from typing import Any

from .exceptions import InvalidElementError, UnknownStrategyError


def _numeric(element: Any, index: int) -> float:
    """Coerce an element to a finite float or raise InvalidElementError."""
    if isinstance(element, bool):
        raise InvalidElementError(
            f"Element {index} is a boolean, not a number.", index=index, element=element
        )
    try:
        value = float(element)
    except (TypeError, ValueError):
        raise InvalidElementError(
            f"Element {index} ({element!r}) is not numeric.", index=index, element=element
        ) from None
    if not math.isfinite(value):
        raise InvalidElementError(
            f"Element {index} ({element!r}) is not finite.", index=index, element=element
        )
    return value


def _clamp(delay: float) -> float:
    return delay if delay > 0.0 else 0.0


class DelayStrategy(ABC):
    """Pure mapping from an element to a non-negative delay in milliseconds."""

    name: str = ""
    description: str = ""

    @abstractmethod
    def compute_delay(self, element: Any, index: int) -> float:
        """Return the delay for ``element`` at ``index``; never negative."""

    def get_name(self) -> str:
        return self.name

    def get_description(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class IdentityDelayStrategy(DelayStrategy):
    name = "identity"
    description = "Wait as many milliseconds as the element's value."

    def compute_delay(self, element: Any, index: int) -> float:
        return _clamp(_numeric(element, index))


class ScaledDelayStrategy(DelayStrategy):
    name = "scaled"
    description = "Wait the element's value multiplied by a fixed factor."

    def __init__(self, factor: float = 10.0) -> None:
        if not math.isfinite(factor) or factor < 0:
            raise ValueError("factor must be a finite, non-negative number.")
        self.factor = float(factor)

    def compute_delay(self, element: Any, index: int) -> float:
        return _clamp(_numeric(element, index) * self.factor)


class LengthDelayStrategy(DelayStrategy):
    name = "length"
    description = "Wait proportionally to the element's length."

    def __init__(self, unit: float = 10.0) -> None:
        if not math.isfinite(unit) or unit < 0:
            raise ValueError("unit must be a finite, non-negative number.")
        self.unit = float(unit)

    def compute_delay(self, element: Any, index: int) -> float:
        if not isinstance(element, Sized):
            raise InvalidElementError(
                f"Element {index} ({element!r}) has no length.", index=index, element=element
            )
        return len(element) * self.unit


class ConstantDelayStrategy(DelayStrategy):
    name = "constant"
    description = "Wait the same fixed delay for every element."

    def __init__(self, delay: float = 100.0) -> None:
        if not math.isfinite(delay) or delay < 0:
            raise ValueError("delay must be a finite, non-negative number.")
        self.delay = float(delay)

    def compute_delay(self, element: Any, index: int) -> float:
        return self.delay


class IndexDelayStrategy(DelayStrategy):
    name = "index"
    description = "Wait proportionally to the element's position (input order)."

    def __init__(self, step: float = 100.0) -> None:
        if not math.isfinite(step) or step < 0:
            raise ValueError("step must be a finite, non-negative number.")
        self.step = float(step)

    def compute_delay(self, element: Any, index: int) -> float:
        return index * self.step


class ReverseDelayStrategy(DelayStrategy):
    """Larger values display first: delay is ``ceiling - value``, floored at zero."""

    name = "reverse"
    description = "Wait the distance between a ceiling and the element's value."

    def __init__(self, ceiling: float = 1000.0) -> None:
        if not math.isfinite(ceiling):
            raise ValueError("ceiling must be finite.")
        self.ceiling = float(ceiling)

    def compute_delay(self, element: Any, index: int) -> float:
        return _clamp(self.ceiling - _numeric(element, index))


class StrategyRegistry:
    """Runtime lookup of delay strategies by identifier.

    The registry holds one instance per id and ``create`` hands that instance
    back. Strategies are stateless, so there is no separate lookup cache.
    """

    def __init__(self) -> None:
        self._strategies: dict[str, DelayStrategy] = {}

    @staticmethod
    def _key(strategy_id: object) -> str | None:
        if not isinstance(strategy_id, str):
            return None
        return strategy_id.strip() or None

    def register(self, strategy_id: str, strategy: DelayStrategy) -> None:
        """Register ``strategy`` under ``strategy_id``, replacing any existing entry."""
        key = self._key(strategy_id)
        if key is None:
            raise ValueError("strategy_id must be a non-empty string.")
        if not isinstance(strategy, DelayStrategy):
            raise TypeError("strategy must be a DelayStrategy instance.")
        self._strategies[key] = strategy

    def unregister(self, strategy_id: str) -> None:
        key = self._key(strategy_id)
        if key is not None:
            self._strategies.pop(key, None)

    def create(self, strategy_id: str) -> DelayStrategy:
        key = self._key(strategy_id)
        strategy = self._strategies.get(key) if key is not None else None
        if strategy is None:
            raise UnknownStrategyError(str(strategy_id), list(self._strategies))
        return strategy

    def ids(self) -> list[str]:
        return list(self._strategies)

    def __contains__(self, strategy_id: object) -> bool:
        key = self._key(strategy_id)
        return key is not None and key in self._strategies

    @classmethod
    def build_default(cls) -> StrategyRegistry:
        reg = cls()
        for strategy in (
            IdentityDelayStrategy(),
            ScaledDelayStrategy(),
            LengthDelayStrategy(),
            ConstantDelayStrategy(),
            IndexDelayStrategy(),
            ReverseDelayStrategy(),
        ):
            reg.register(strategy.name, strategy)
        return reg


_default_registry: StrategyRegistry | None = None


def get_registry() -> StrategyRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = StrategyRegistry.build_default()
    return _default_registry
