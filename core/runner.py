"""
Code runner.

Sends code to the remote judge and shapes the finished submission into
an ExecutionResult.
"""

from typing import Any, Optional

from .languages import get_language
from .models import ExecutionResult
from providers.judge0_provider import Judge0Provider


NO_OUTPUT = "No output"


def display_output(submission: dict[str, Any]) -> str:
    """First non-empty of stdout, stderr and compile output."""
    return (
        submission.get("stdout")
        or submission.get("stderr")
        or submission.get("compile_output")
        or NO_OUTPUT
    )


class CodeRunner:
    """
    Remote code runner backed by Judge0.

    Takes code, language and stdin; returns program output.
    """

    def __init__(self, provider: Optional[Judge0Provider] = None):
        """Initialize runner, optionally with a preconfigured provider."""
        self._provider = provider

    async def _get_provider(self) -> Judge0Provider:
        """Get or create Judge0 provider."""
        if self._provider is None:
            self._provider = Judge0Provider()
        return self._provider

    async def is_available(self) -> bool:
        provider = await self._get_provider()
        return provider.is_available()

    async def close(self) -> None:
        """Close provider connection."""
        if self._provider:
            await self._provider.close()
            self._provider = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def run(self, code: str, language_id: int, stdin: str = "") -> ExecutionResult:
        """
        Compile and run code remotely.

        Args:
            code: Source code string
            language_id: Judge0 language id from the language table
            stdin: Program input

        Returns:
            ExecutionResult with the judge's output

        Raises:
            Judge0APIError: If the judge rejects or never finishes the submission
            UnsupportedLanguageError: If language_id is not in the table
            ValueError: If code is blank
        """
        if not code or not code.strip():
            raise ValueError("Code cannot be empty")

        get_language(language_id)

        provider = await self._get_provider()
        submission = await provider.execute(code, language_id, stdin or "")

        status = submission.get("status") or {}
        return ExecutionResult(
            token=submission["token"],
            output=display_output(submission),
            stdout=submission.get("stdout"),
            stderr=submission.get("stderr"),
            compile_output=submission.get("compile_output"),
            status=status.get("description"),
            time=submission.get("time"),
            memory=submission.get("memory"),
        )
