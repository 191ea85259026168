"""
Data models for the complexity estimator and remote execution.
"""
from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


TIME_LABELS = (
    "O(1)",
    "O(log n)",
    "O(n)",
    "O(n log n)",
    "O(n^2)",
    "O(n^3)",
    "O(2^n)",
    "O(n · 2^n)",
)
SPACE_LABELS = ("O(1)", "O(n)")

_POLYNOMIAL_LABEL = re.compile(r"O\(n\^(\d+)\)")


class ComplexityEstimate(BaseModel):
    """
    Heuristic time and space complexity of a piece of source code.

    Immutable; recomputed on every estimation call.
    """

    model_config = ConfigDict(frozen=True)

    time: str = Field(description="Estimated time complexity in Big-O notation")
    space: str = Field(description="Estimated space complexity in Big-O notation")

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if v in TIME_LABELS:
            return v
        match = _POLYNOMIAL_LABEL.fullmatch(v)
        if match and int(match.group(1)) >= 4:
            return v
        raise ValueError(f"Unknown time complexity label: {v!r}")

    @field_validator("space")
    @classmethod
    def validate_space(cls, v: str) -> str:
        if v not in SPACE_LABELS:
            raise ValueError(f"Unknown space complexity label: {v!r}")
        return v


class SourceSignals(BaseModel):
    """Raw signals the estimator extracts from source text."""

    model_config = ConfigDict(frozen=True)

    recursive: bool = False
    halving: bool = False
    max_loop_depth: int = Field(default=0, ge=0)


class Language(BaseModel):
    """A language the remote judge can compile and run."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Judge0 language id")
    name: str = Field(description="Display name including compiler version")
    editor_mode: str = Field(description="Syntax mode for the code editor")


class ExecutionResult(BaseModel):
    """Outcome of a remote compile-and-run."""

    token: str
    output: str = Field(description="stdout, else stderr, else compile output")
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    status: Optional[str] = Field(default=None, description="Judge0 status description")
    time: Optional[str] = Field(default=None, description="CPU time in seconds")
    memory: Optional[int] = Field(default=None, description="Memory in KB")
