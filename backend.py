"""
FastAPI backend for the Code Compiler.

Runs code on a remote judge and returns a heuristic complexity estimate
alongside the program output.
"""

import time
from datetime import datetime, timezone

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator

from core.config import settings, logger
from core.estimator import estimate
from core.languages import DEFAULT_LANGUAGE_ID, LANGUAGES, LANGUAGES_BY_ID
from core.models import ComplexityEstimate, ExecutionResult, Language
from core.runner import CodeRunner
from providers.judge0_provider import Judge0APIError

# Load environment variables
load_dotenv()

__version__ = "1.0.0"


# Request/Response Models
class EstimateRequest(BaseModel):
    """Request model - only accepts code."""
    code: str = Field(default="", max_length=settings.MAX_CODE_LENGTH, description="Code to estimate")


class EstimateResponse(BaseModel):
    """Response model with the complexity estimate."""
    success: bool = True
    result: ComplexityEstimate


class RunRequest(BaseModel):
    """Request model for a compile-and-run."""
    code: str = Field(..., min_length=1, max_length=settings.MAX_CODE_LENGTH, description="Source code")
    language_id: int = Field(default=DEFAULT_LANGUAGE_ID, description="Judge0 language id")
    stdin: str = Field(default="", max_length=settings.MAX_STDIN_LENGTH, description="Program input")

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Code cannot be empty or whitespace only")
        return v

    @field_validator("language_id")
    @classmethod
    def validate_language(cls, v: int) -> int:
        if v not in LANGUAGES_BY_ID:
            raise ValueError(f"Unsupported language id: {v}")
        return v


class RunResponse(BaseModel):
    """Response model with program output and complexity estimate."""
    success: bool
    result: ExecutionResult | None = None
    complexity: ComplexityEstimate
    error: str | None = None


class LanguagesResponse(BaseModel):
    default: int
    languages: list[Language]


# Initialize FastAPI
app = FastAPI(
    title="Code Compiler",
    description="Compile and run code remotely with a heuristic complexity estimate",
    version=__version__
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _request_id() -> str:
    return datetime.now().strftime("%Y%m%d-%H%M%S-%f")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Code Compiler API",
        "version": __version__,
        "endpoints": {
            "/estimate": "POST - Estimate time and space complexity (input: code only)",
            "/run": "POST - Compile and run code on Judge0",
            "/languages": "GET - Supported languages",
            "/health": "GET - Health check"
        }
    }


@app.get("/health")
async def health():
    """Health check."""
    async with CodeRunner() as runner:
        judge0_ready = await runner.is_available()
    return {
        "status": "ok",
        "judge0": "ready" if judge0_ready else "unconfigured",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/languages", response_model=LanguagesResponse)
async def languages():
    """Languages offered in the editor."""
    return LanguagesResponse(default=DEFAULT_LANGUAGE_ID, languages=list(LANGUAGES))


@app.post("/estimate", response_model=EstimateResponse)
def estimate_code(request: EstimateRequest):
    """
    Estimate code complexity.

    Takes ONLY code as input. Returns time and space complexity.
    """
    request_id = _request_id()
    start_time = time.time()

    result = estimate(request.code)

    elapsed_time = time.time() - start_time
    logger.info(f"[{request_id}] ESTIMATE - {len(request.code)} chars in {elapsed_time:.3f}s - Result: {result.time}, {result.space}")

    return EstimateResponse(success=True, result=result)


@app.post("/run", response_model=RunResponse)
async def run_code(request: RunRequest):
    """
    Compile and run code.

    The complexity estimate is returned even when the run fails.
    """
    request_id = _request_id()
    start_time = time.time()

    logger.info(f"[{request_id}] RUN RECEIVED - language={request.language_id}, code length: {len(request.code)} chars")

    complexity = estimate(request.code)

    async with CodeRunner() as runner:
        if not await runner.is_available():
            raise HTTPException(
                status_code=503,
                detail="Judge0 not configured. Please set JUDGE0_API_KEY."
            )

        try:
            result = await runner.run(request.code, request.language_id, request.stdin)
        except (Judge0APIError, httpx.HTTPError) as e:
            elapsed_time = time.time() - start_time
            logger.error(f"[{request_id}] RUN FAILED - Time taken: {elapsed_time:.3f}s - Error: {str(e)}")
            return RunResponse(success=False, complexity=complexity, error=str(e))

    elapsed_time = time.time() - start_time
    logger.info(f"[{request_id}] RUN COMPLETED - Time taken: {elapsed_time:.3f}s - Status: {result.status}")

    return RunResponse(success=True, result=result, complexity=complexity)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("backend:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
