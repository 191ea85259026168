"""Remote execution providers."""

from .judge0_provider import Judge0Provider, Judge0APIError

__all__ = [
    "Judge0Provider",
    "Judge0APIError",
]
