# utils/constants.py
# AlgoCoach — Single source of truth for all magic numbers.
# No other file defines constants. Import from here only.

# ─────────────────────────────────────────────
# SCORING ENGINE
# ─────────────────────────────────────────────

SCORE_BASE: int = 100
SCORE_CAP: int  = 100    # final_score is clamped here; raw_score keeps the time bonus

# (min_pass_rate, coefficient), first match wins; pass_rate == 1.0 handled separately
CORRECTNESS_FULL: float = 1.0
CORRECTNESS_BANDS: tuple[tuple[float, float], ...] = (
    (0.8, 0.7),
    (0.5, 0.4),
)
CORRECTNESS_FLOOR: float = 0.0

# (max_difficulty, expected_time_ms)
EXPECTED_TIME_BANDS: tuple[tuple[int, int], ...] = (
    (2, 300_000),
    (4, 600_000),
    (6, 900_000),
    (8, 1_200_000),
)
EXPECTED_TIME_MAX_MS: int = 1_800_000

TIME_FAST_RATIO: float  = 0.5    # ratio <  0.5        → bonus
TIME_ON_PACE_RATIO: float = 1.0  # 0.5 <= ratio <= 1.0 → neutral
TIME_SLOW_RATIO: float  = 2.0    # 1.0 <  ratio <= 2.0 → mild penalty, beyond → heavy
TIME_COEFF_FAST: float    = 1.2
TIME_COEFF_ON_PACE: float = 1.0
TIME_COEFF_SLOW: float    = 0.9
TIME_COEFF_VERY_SLOW: float = 0.7

# max hint level used → multiplier
HINT_PENALTY: dict[int, float] = {
    1: 0.95,
    2: 0.85,
    3: 0.70,
    4: 0.50,
}
HINT_PENALTY_NONE: float = 1.0
HINT_LEVEL_MIN: int = 1
HINT_LEVEL_MAX: int = 4

# Percentages shown to the learner when a hint is unlocked
HINT_PENALTY_PERCENT: dict[int, int] = {
    level: round((1 - coeff) * 100) for level, coeff in HINT_PENALTY.items()
}

QUALITY_DEFAULT: float = 1.0
QUALITY_SCORE_MAX: float = 10.0   # analyzer overallScore is on a 0..10 scale

# ─────────────────────────────────────────────
# DIFFICULTY ADJUSTER
# ─────────────────────────────────────────────

LEVEL_MIN: int = 1
LEVEL_MAX: int = 10
DIFFICULTY_MIN: int = 1
DIFFICULTY_MAX: int = 10

DIFFICULTY_WINDOW: int = 5          # most recent scores considered
DIFFICULTY_MIN_SCORES: int = 2      # below this, never adjust

UP_STREAK_LEN: int = 3
UP_STREAK_MIN_SCORE: float = 80.0
UP_AVERAGE_MIN: float = 85.0

DOWN_STREAK_LEN: int = 2
DOWN_STREAK_MAX_SCORE: float = 50.0   # strictly below
DOWN_AVERAGE_MAX: float = 40.0        # strictly below

# ─────────────────────────────────────────────
# PROFICIENCY TRACKER
# ─────────────────────────────────────────────

PROFICIENCY_DEFAULT: float = 5.0
PROFICIENCY_MIN: float = 1.0
PROFICIENCY_MAX: float = 10.0

# (min_score, delta), first match wins; anything lower gets PROFICIENCY_DELTA_FLOOR
PROFICIENCY_STEPS: tuple[tuple[float, float], ...] = (
    (90.0, 0.3),
    (80.0, 0.2),
    (70.0, 0.1),
    (60.0, 0.0),
    (50.0, -0.1),
)
PROFICIENCY_DELTA_FLOOR: float = -0.2

RECENT_SCORES_CAPACITY: int = 10
RECENT_WINDOW_ACCEPTED_ONLY: bool = False   # False = every graded submission is pushed

# ─────────────────────────────────────────────
# PROFILE PERSISTENCE (optimistic concurrency)
# ─────────────────────────────────────────────

PROFILE_UPDATE_MAX_RETRIES: int = 5

# ─────────────────────────────────────────────
# SUBMISSION STATUS
# ─────────────────────────────────────────────

STATUS_ACCEPTED: str     = "accepted"
STATUS_WRONG_ANSWER: str = "wrong_answer"

MAX_CODE_LENGTH: int = 50_000
EXAMPLE_CASES_SHOWN: int = 2         # test cases exposed on GET /problems/{id}
HISTORY_PAGE_MAX: int = 200

STATS_ACTIVITY_DAYS: int = 30       # window for /stats/overview daily activity
STATS_PROGRESS_POINTS: int = 20     # accepted scores on /stats/progress

# ─────────────────────────────────────────────
# JUDGE0 CODE RUNNER
# ─────────────────────────────────────────────

JUDGE0_DEFAULT_URL: str      = "http://localhost:2358"
JUDGE0_HTTP_TIMEOUT_S: float = 10.0
JUDGE0_POLL_INTERVAL_S: float = 0.5
JUDGE0_MAX_POLL_ATTEMPTS: int = 20

# Judge0 status ids: 1 = In Queue, 2 = Processing, anything above is terminal
JUDGE0_STATUS_PROCESSING: int = 2
JUDGE0_STATUS_INTERNAL_ERROR: int = 13

LANGUAGE_IDS: dict[str, int] = {
    "python":     71,
    "javascript": 63,
    "cpp":        54,
    "java":       62,
    "c":          50,
    "go":         60,
    "rust":       73,
}

# ─────────────────────────────────────────────
# LLM CONFIGURATION (platform defaults)
# ─────────────────────────────────────────────

LLM_DEFAULT_PROVIDER: str = "deepseek"
LLM_DEFAULT_BASE_URL: str = "https://api.deepseek.com"
LLM_DEFAULT_MODEL: str    = "deepseek-chat"
LLM_CHAT_PATH: str        = "/chat/completions"
LLM_TIMEOUT_S: int        = 30

ANALYZER_TEMPERATURE: float = 0.5
ANALYZER_MAX_TOKENS: int    = 1500
HINT_TEMPERATURE: float     = 0.7
HINT_MAX_TOKENS: int        = 1000

# ─────────────────────────────────────────────
# SERVER CONFIGURATION
# ─────────────────────────────────────────────

SERVER_HOST: str = "0.0.0.0"
SERVER_PORT: int = 8000
