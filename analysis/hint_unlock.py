# analysis/hint_unlock.py
# AlgoCoach — Strict sequential hint unlock (level L+1 needs level L first).
# Imports from: database/stores.py, utils/constants.py, utils/errors.py, utils/logger.py

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from database.models import HintUsage
from database.stores import get_problem, get_user, list_hints, record_hint
from utils.constants import HINT_LEVEL_MAX, HINT_LEVEL_MIN, HINT_PENALTY_PERCENT
from utils.errors import InvalidInput
from utils.logger import get_logger

log = get_logger("analysis.hint_unlock")


@dataclass
class HintUnlockResult:
    hint:               HintUsage
    penalty_percent:    int
    already_obtained:   bool


def request_hint(
    user_id:            str,
    problem_id:         str,
    hint_level:         int,
    generator,
    db:                 Session,
    current_code:       Optional[str] = None,
    language:           str = "python",
    force_regenerate:   bool = False,
) -> HintUnlockResult:
    """
    Rules, checked in order:
        1. hint_level must be in [1, 4]
        2. level > 1 requires an existing record for level - 1
        3. an existing record for this level is returned as-is
           (already_obtained=True) unless force_regenerate
        4. otherwise generator.generate(...) produces the text and a new
           record is appended
    """
    if not HINT_LEVEL_MIN <= hint_level <= HINT_LEVEL_MAX:
        raise InvalidInput(f"hint_level must be in [{HINT_LEVEL_MIN}, {HINT_LEVEL_MAX}].")

    get_user(user_id, db)
    existing = list_hints(user_id, problem_id, db)
    unlocked = {h.hint_level for h in existing}

    if hint_level > HINT_LEVEL_MIN and (hint_level - 1) not in unlocked:
        log.info(
            "hint_request_out_of_order",
            user_id=user_id,
            problem_id=problem_id,
            requested=hint_level,
            unlocked=sorted(unlocked),
        )
        raise InvalidInput(
            f"Level {hint_level - 1} hint must be obtained before level {hint_level}."
        )

    if not force_regenerate:
        for row in existing:
            if row.hint_level == hint_level:
                return HintUnlockResult(
                    hint=row,
                    penalty_percent=HINT_PENALTY_PERCENT[hint_level],
                    already_obtained=True,
                )

    problem = get_problem(problem_id, db)
    content = generator.generate(
        problem_description=problem.description,
        current_code=current_code or "",
        level=hint_level,
        language=language,
    )
    row = record_hint(
        user_id=user_id,
        problem_id=problem_id,
        hint_level=hint_level,
        content=content,
        language=language,
        code_snapshot=current_code,
        db=db,
    )
    return HintUnlockResult(
        hint=row,
        penalty_percent=HINT_PENALTY_PERCENT[hint_level],
        already_obtained=False,
    )
