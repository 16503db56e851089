# ai/hint_generator.py
# AlgoCoach — Progressive hint text from the LLM. Output is opaque to the engine.
# Imports from: ai/llm_client.py, utils/config.py, utils/constants.py, utils/logger.py

from ai.llm_client import chat
from utils.config import LLMConfig
from utils.constants import HINT_MAX_TOKENS, HINT_TEMPERATURE
from utils.logger import get_logger

log = get_logger("ai.hint_generator")


_LEVEL_GUIDANCE: dict[int, str] = {
    1: "Give a gentle nudge: name the relevant idea or data structure only.",
    2: "Describe the overall approach in two or three sentences, no code.",
    3: "Outline the algorithm step by step in plain language, no code.",
    4: "Give detailed pseudocode for the key part of the solution.",
}


class HintGenerator:
    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    def generate(
        self,
        problem_description:    str,
        current_code:           str,
        level:                  int,
        language:               str,
    ) -> str:
        """Raises LLMCallError; the caller decides how to surface it."""
        messages = [
            {
                "role": "system",
                "content": (
                    "You are an algorithm tutor. Never reveal a complete solution. "
                    + _LEVEL_GUIDANCE[level]
                ),
            },
            {
                "role": "user",
                "content": (
                    f"Problem:\n{problem_description}\n\n"
                    f"My current {language} code:\n{current_code or '(none yet)'}\n\n"
                    f"Give me a level {level} hint."
                ),
            },
        ]
        content = chat(self.config, messages, HINT_TEMPERATURE, HINT_MAX_TOKENS)
        log.info("hint_generated", level=level, language=language, length=len(content))
        return content
