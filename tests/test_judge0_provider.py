# tests/test_judge0_provider.py

import asyncio
import json

import httpx
import pytest

from core.languages import UnsupportedLanguageError
from core.runner import CodeRunner, display_output
from providers.judge0_provider import Judge0APIError, Judge0Provider


BASE_URL = "https://judge0.test"


def make_provider(handler, **kwargs):
    kwargs.setdefault("api_key", "")
    return Judge0Provider(
        base_url=BASE_URL,
        poll_interval=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def judge_handler(states, seen=None):
    """Accept one submission, then answer polls with the given states in order."""
    states = list(states)

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.method == "POST":
            return httpx.Response(201, json={"token": "tok-1"})
        return httpx.Response(200, json=states.pop(0))

    return handler


def test_execute_polls_until_finished():
    seen = []
    handler = judge_handler(
        [
            {"status": {"id": 1, "description": "In Queue"}},
            {"status": {"id": 2, "description": "Processing"}},
            {"status": {"id": 3, "description": "Accepted"}, "stdout": "42\n"},
        ],
        seen,
    )

    async def go():
        async with make_provider(handler) as provider:
            return await provider.execute("print(42)", 71, "")

    result = asyncio.run(go())

    assert result["stdout"] == "42\n"
    assert result["token"] == "tok-1"
    assert len(seen) == 4

    submit = seen[0]
    assert submit.url.path == "/submissions"
    assert submit.url.params["wait"] == "false"
    assert submit.url.params["base64_encoded"] == "false"
    assert json.loads(submit.content) == {
        "source_code": "print(42)",
        "language_id": 71,
        "stdin": "",
    }
    assert seen[1].url.path == "/submissions/tok-1"


def test_rapidapi_headers_only_with_key():
    seen = []
    handler = judge_handler([{"status": {"id": 3}}], seen)

    async def go():
        async with make_provider(handler, api_key="secret", api_host="judge.host") as provider:
            await provider.execute("x", 54)

    asyncio.run(go())
    assert seen[0].headers["X-RapidAPI-Key"] == "secret"
    assert seen[0].headers["X-RapidAPI-Host"] == "judge.host"

    seen.clear()
    handler = judge_handler([{"status": {"id": 3}}], seen)

    async def go_keyless():
        async with make_provider(handler) as provider:
            await provider.execute("x", 54)

    asyncio.run(go_keyless())
    assert "X-RapidAPI-Key" not in seen[0].headers


def test_polling_gives_up():
    handler = judge_handler([{"status": {"id": 1}}] * 3)

    async def go():
        async with make_provider(handler, max_polls=3) as provider:
            await provider.execute("x", 54)

    with pytest.raises(Judge0APIError, match="still pending"):
        asyncio.run(go())


def test_error_status_raises():
    def handler(request):
        return httpx.Response(401, json={"message": "Invalid API key"})

    async def go():
        async with make_provider(handler) as provider:
            await provider.submit("x", 54)

    with pytest.raises(Judge0APIError) as exc_info:
        asyncio.run(go())
    assert exc_info.value.status_code == 401
    assert "Invalid API key" in exc_info.value.message


def test_zero_max_polls_is_respected():
    seen = []
    handler = judge_handler([{"status": {"id": 3}}], seen)

    async def go():
        async with make_provider(handler, max_polls=0) as provider:
            assert provider.max_polls == 0
            await provider.execute("x", 54)

    with pytest.raises(Judge0APIError, match="after 0 polls"):
        asyncio.run(go())
    assert [request.method for request in seen] == ["POST"]


@pytest.mark.parametrize("body", [["tok-1"], "tok-1", 42])
def test_non_object_body_raises(body):
    def handler(request):
        return httpx.Response(201, json=body)

    async def go():
        async with make_provider(handler) as provider:
            await provider.submit("x", 54)

    with pytest.raises(Judge0APIError, match="Expected a JSON object"):
        asyncio.run(go())


def test_submission_is_not_resent_on_timeout():
    seen = []

    def handler(request):
        seen.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    async def go():
        async with make_provider(handler) as provider:
            await provider.submit("x", 54)

    with pytest.raises(httpx.ReadTimeout):
        asyncio.run(go())
    assert len(seen) == 1


def test_missing_token_raises():
    def handler(request):
        return httpx.Response(201, json={})

    async def go():
        async with make_provider(handler) as provider:
            await provider.submit("x", 54)

    with pytest.raises(Judge0APIError, match="no token"):
        asyncio.run(go())


def test_availability():
    assert Judge0Provider(base_url="https://judge0-ce.p.rapidapi.com", api_key="").is_available() is False
    assert Judge0Provider(base_url="https://judge0-ce.p.rapidapi.com", api_key="k").is_available() is True
    assert Judge0Provider(base_url="http://localhost:2358", api_key="").is_available() is True


@pytest.mark.parametrize("submission,expected", [
    ({"stdout": "out", "stderr": "err"}, "out"),
    ({"stdout": "", "stderr": "err", "compile_output": "c"}, "err"),
    ({"stdout": None, "stderr": None, "compile_output": "main.cpp:1: error"}, "main.cpp:1: error"),
    ({}, "No output"),
])
def test_display_output(submission, expected):
    assert display_output(submission) == expected


def test_runner_builds_execution_result():
    handler = judge_handler([{
        "status": {"id": 6, "description": "Compilation Error"},
        "stdout": None,
        "stderr": None,
        "compile_output": "error: expected ';'",
        "time": None,
        "memory": None,
    }])

    async def go():
        async with CodeRunner(make_provider(handler)) as runner:
            return await runner.run("int main() { return 0 }", 54, "")

    result = asyncio.run(go())
    assert result.token == "tok-1"
    assert result.output == "error: expected ';'"
    assert result.status == "Compilation Error"


def test_runner_rejects_bad_input():
    def handler(request):
        raise AssertionError("judge should not be called")

    async def go(code, language_id):
        async with CodeRunner(make_provider(handler)) as runner:
            await runner.run(code, language_id)

    with pytest.raises(ValueError):
        asyncio.run(go("   ", 54))
    with pytest.raises(UnsupportedLanguageError):
        asyncio.run(go("print(1)", 999))
