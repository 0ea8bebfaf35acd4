"""Base classes shared by configuration and runtime state models.

Kept apart from config.py so that log.py can depend on them without
importing the whole configuration tree.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Anything holding a resource that must be released."""

    def close(self) -> None:
        ...


class BaseCloseable(BaseModel):
    """Model that closes every Closeable field when it is closed.

    Usable as a context manager. A failing child does not stop the
    remaining children from being closed; the failure is reported on
    stderr because the logger may be the thing being closed.
    """

    def close(self):
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None or not isinstance(child, Closeable):
                continue
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
    """Marker for sections loaded from YAML/env/CLI."""


class BaseState(BaseCloseable):
    """Marker for sections mutated while a build runs."""


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]
