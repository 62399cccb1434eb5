"""Tests for assesspo.generate — single generator round-trip."""

import asyncio
from unittest.mock import MagicMock

import pytest

from assesspo.errors import DeadlineExceededError, GenerationError
from assesspo.generate import generate_text
from assesspo.llm.client import GenerationOptions, GenerationRequest, TextGenerator


class _EchoGenerator(TextGenerator):
    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.requests: list[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        await asyncio.sleep(self.delay)
        return "echo"


@pytest.mark.asyncio
async def test_request_carries_text_hint_and_options():
    gen = _EchoGenerator()
    opts = GenerationOptions(temperature=0.2)
    result = await generate_text(gen, "grade this", output_hint="JSON only", options=opts)
    assert result == "echo"
    request = gen.requests[0]
    assert request.prompt.input == "grade this"
    assert request.prompt.output == "JSON only"
    assert request.options == opts


@pytest.mark.asyncio
async def test_debug_sink_sees_prompt_and_response():
    debug = MagicMock()
    await generate_text(_EchoGenerator(), "grade this", output_hint="JSON only", debug=debug)
    logged_prompt = debug.log_prompt.call_args.args[0]
    assert "grade this" in logged_prompt
    assert "Output:\nJSON only" in logged_prompt
    debug.log_response.assert_called_once_with("echo")


@pytest.mark.asyncio
async def test_call_timeout_raises_deadline_error():
    with pytest.raises(DeadlineExceededError):
        await generate_text(_EchoGenerator(delay=1.0), "slow", call_timeout=0.05)


@pytest.mark.asyncio
async def test_no_timeout_by_default():
    assert await generate_text(_EchoGenerator(delay=0.01), "fast") == "echo"


class _SocketTimeoutGenerator(TextGenerator):
    async def generate(self, request: GenerationRequest) -> str:
        raise TimeoutError("socket read timed out")


@pytest.mark.asyncio
@pytest.mark.parametrize("call_timeout", [None, 5.0])
async def test_generator_timeout_is_transient_generation_error(call_timeout):
    with pytest.raises(GenerationError) as exc_info:
        await generate_text(_SocketTimeoutGenerator(), "grade this", call_timeout=call_timeout)
    assert exc_info.value.transient is True
    assert not isinstance(exc_info.value, DeadlineExceededError)
    assert isinstance(exc_info.value.__cause__, TimeoutError)
