# ai/quality_analyzer.py
# AlgoCoach — LLM code review for accepted submissions → quality coefficient.
# Optional step: any failure degrades to the neutral coefficient 1.0.
# Imports from: ai/llm_client.py, utils/config.py, utils/constants.py,
#               utils/errors.py, utils/logger.py

from typing import Any, Optional

from ai.llm_client import chat, extract_json
from utils.config import LLMConfig
from utils.constants import (
    ANALYZER_MAX_TOKENS,
    ANALYZER_TEMPERATURE,
    QUALITY_DEFAULT,
    QUALITY_SCORE_MAX,
)
from utils.errors import AnalyzerFailure, LLMCallError
from utils.logger import get_logger

log = get_logger("ai.quality_analyzer")


_SYSTEM_PROMPT = (
    "You are a professional code review expert. You must only return valid JSON, "
    "do not wrap responses in Markdown code blocks, and do not add any explanatory text."
)

_USER_TEMPLATE = """Please analyze the quality of the following {language} code:

Problem:
{problem}

Code:

```{language}
{code}
```

Please rate on the following dimensions (0-10):
1. Time complexity
2. Space complexity
3. Code readability
4. Code style
5. Edge case handling

Return in JSON format:
{{
  "timeComplexity": {{"score": 8, "actual": "O(n)", "optimal": "O(n)"}},
  "spaceComplexity": {{"score": 7, "actual": "O(n)", "optimal": "O(1)"}},
  "readability": 8,
  "codeStyle": 9,
  "edgeCases": 7,
  "overallScore": 8,
  "suggestions": ["Suggestion 1", "Suggestion 2"]
}}"""


class QualityAnalyzer:
    """Binds an LLMConfig; analyze() is the collaborator the pipeline calls."""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    def analyze(self, code: str, language: str, problem_description: str) -> dict[str, Any]:
        """
        Returns the parsed review dict (overallScore on a 0..10 scale).
        Raises AnalyzerFailure on any LLM or parse problem.
        """
        messages = [
            {"role": "system", "content": _SYSTEM_PROMPT},
            {"role": "user", "content": _USER_TEMPLATE.format(
                language=language,
                problem=problem_description,
                code=code,
            )},
        ]

        try:
            raw = chat(self.config, messages, ANALYZER_TEMPERATURE, ANALYZER_MAX_TOKENS)
        except LLMCallError as exc:
            raise AnalyzerFailure(f"llm call failed: {exc}") from exc

        try:
            analysis = extract_json(raw)
        except ValueError as exc:
            log.warning("quality_analysis_parse_failed", raw_preview=raw[:200])
            raise AnalyzerFailure(f"unparseable analysis: {exc}") from exc

        log.info(
            "quality_analysis_complete",
            overall_score=analysis.get("overallScore"),
            provider=self.config.provider,
        )
        return analysis


def quality_coefficient_from(analysis: Optional[dict[str, Any]]) -> float:
    """
    overallScore / 10, clamped to [0, 1]. A missing or non-numeric
    overallScore counts as a perfect 10.
    """
    if not analysis:
        return QUALITY_DEFAULT

    overall = analysis.get("overallScore")
    try:
        overall = float(overall) if overall is not None else QUALITY_SCORE_MAX
    except (TypeError, ValueError):
        overall = QUALITY_SCORE_MAX

    return max(0.0, min(1.0, overall / QUALITY_SCORE_MAX))
