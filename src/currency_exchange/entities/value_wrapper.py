"""Cache value holder."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValueWrapper:
    """A value found in a cache.

    Wrapping lets callers tell a cached ``None`` apart from a cache miss:
    a miss is reported as no wrapper at all.
    """

    value: Any
