"""Utility for sending one engine request to the text generator."""

import asyncio

from assesspo.debug import DebugManager
from assesspo.errors import DeadlineExceededError, GenerationError
from assesspo.llm.client import GenerationOptions, GenerationRequest, TextGenerator
from assesspo.types import Prompt


async def generate_text(
    generator: TextGenerator,
    request_text: str,
    *,
    output_hint: str = "",
    options: GenerationOptions | None = None,
    call_timeout: float | None = None,
    debug: DebugManager | None = None,
) -> str:
    """Send ``request_text`` to the generator and return the raw response.

    The prompt and response are passed to the debug sink. When
    ``call_timeout`` is set, expiry raises DeadlineExceededError rather than
    a generation failure; a TimeoutError raised by the generator itself is
    a transient GenerationError.
    """
    request = GenerationRequest(
        prompt=Prompt(input=request_text, output=output_hint),
        options=options or GenerationOptions(),
    )
    if debug is not None:
        debug.log_prompt(request.prompt.render())

    deadline = asyncio.timeout(call_timeout)
    try:
        async with deadline:
            response = await generator.generate(request)
    except TimeoutError as e:
        if deadline.expired():
            raise DeadlineExceededError(
                f"generation call exceeded {call_timeout}s deadline"
            ) from e
        # Raised by the generator itself, e.g. a socket read timeout.
        raise GenerationError(f"generation timed out: {e}", transient=True) from e

    if debug is not None:
        debug.log_response(response)
    return response
