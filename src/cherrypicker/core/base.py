"""Base classes for configuration and state models.

- Closeable Protocol for resource cleanup
- BaseCloseable for automatic cleanup cascade
- BaseConfig for configuration sections
- BaseState for runtime state sections

Kept apart from config.py so log.py can import them without a cycle.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


@runtime_checkable
class Closeable(Protocol):
    """Protocol for objects that support close()."""

    def close(self) -> None:
        ...


class BaseCloseable(BaseModel):
    """Pydantic model that closes its Closeable children on exit.

    State.__exit__() → RunConfig.close() → Logger.close() → Sink.close()
    """

    def close(self):
        """Close every Closeable field, continuing past failures."""
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None:
                continue

            if isinstance(child, Closeable):
                try:
                    child.close()
                except Exception as e:
                    print(
                        f"Warning: Error closing {field_name}: {e}",
                        file=sys.stderr,
                    )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Marker for configuration loaded from YAML/env/CLI."""
    pass


class FrozenConfig(BaseConfig):
    """Configuration section that cannot change once loaded."""

    model_config = ConfigDict(frozen=True)


class BaseState(BaseCloseable):
    """Marker for runtime state mutated while a run executes."""
    pass


__all__ = [
    "Closeable",
    "BaseCloseable",
    "BaseConfig",
    "FrozenConfig",
    "BaseState",
]
