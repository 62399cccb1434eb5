"""Debug sink for raw prompts and responses exchanged with the model."""

import logging

logger = logging.getLogger("assesspo.debug")


class DebugManager:
    """Writes raw prompt/response text to the ``assesspo.debug`` logger.

    Fire-and-forget: a failure inside logging is never allowed to reach
    the optimization loop.
    """

    def __init__(self, log_prompts: bool = True, log_responses: bool = True) -> None:
        self.log_prompts = log_prompts
        self.log_responses = log_responses

    def log_prompt(self, text: str) -> None:
        if self.log_prompts:
            self._emit("Prompt:\n%s", text)

    def log_response(self, text: str) -> None:
        if self.log_responses:
            self._emit("Response:\n%s", text)

    @staticmethod
    def _emit(fmt: str, text: str) -> None:
        try:
            logger.debug(fmt, text)
        except Exception:  # noqa: BLE001 - the sink must never fail the run
            pass
