# database/seed.py
# AlgoCoach — Seeds a small starter problem bank on first run.
# Imports from: database/db.py, database/models.py, utils/logger.py

from database.db import db_session, problem_count
from database.models import Problem
from utils.logger import get_logger

log = get_logger("database.seed")


def seed_problems() -> bool:
    """Inserts the starter problems if the table is empty. Returns True if it seeded."""
    with db_session() as db:
        if problem_count(db) > 0:
            return False
        problems = _build_problems()
        for p in problems:
            db.add(Problem(**p))
    log.info("seed_complete", total=len(problems))
    return True


def _tc(input_val: str, output_val: str) -> dict:
    return {"input": input_val, "output": output_val}


def _build_problems() -> list[dict]:
    return [

        # ─────────────────────────────────────────────
        # two-sum | array, hash_table | 2
        # ─────────────────────────────────────────────
        {
            "problem_id": "two-sum",
            "title": "Two Sum",
            "description": (
                "The first line holds space-separated integers, the second a target.\n"
                "Print the 0-based indices i < j with nums[i] + nums[j] == target,\n"
                "separated by a space. Exactly one answer exists."
            ),
            "difficulty": 2,
            "algorithm_types": ["array", "hash_table"],
            "expected_complexity": "O(n)",
            "created_by": "seed",
            "test_cases": [
                _tc("2 7 11 15\n9",  "0 1"),
                _tc("3 2 4\n6",      "1 2"),
                _tc("3 3\n6",        "0 1"),
                _tc("1 5 9 13\n22",  "2 3"),
            ],
        },

        # ─────────────────────────────────────────────
        # valid-parentheses | stack, string | 3
        # ─────────────────────────────────────────────
        {
            "problem_id": "valid-parentheses",
            "title": "Valid Parentheses",
            "description": (
                "Read one line of brackets ()[]{}. Print true if every bracket is\n"
                "closed by the same type in the correct order, otherwise false."
            ),
            "difficulty": 3,
            "algorithm_types": ["stack", "string"],
            "expected_complexity": "O(n)",
            "created_by": "seed",
            "test_cases": [
                _tc("()",       "true"),
                _tc("()[]{}",   "true"),
                _tc("(]",       "false"),
                _tc("([)]",     "false"),
                _tc("{[]}",     "true"),
            ],
        },

        # ─────────────────────────────────────────────
        # binary-search | binary_search, array | 4
        # ─────────────────────────────────────────────
        {
            "problem_id": "binary-search",
            "title": "Binary Search",
            "description": (
                "The first line holds sorted space-separated integers, the second a\n"
                "target. Print the index of the target, or -1 if it is absent.\n"
                "Aim for O(log n)."
            ),
            "difficulty": 4,
            "algorithm_types": ["binary_search", "array"],
            "expected_complexity": "O(log n)",
            "created_by": "seed",
            "test_cases": [
                _tc("-1 0 3 5 9 12\n9", "4"),
                _tc("-1 0 3 5 9 12\n2", "-1"),
                _tc("5\n5",             "0"),
                _tc("1 3\n3",           "1"),
            ],
        },

        # ─────────────────────────────────────────────
        # climbing-stairs | dynamic_programming | 5
        # ─────────────────────────────────────────────
        {
            "problem_id": "climbing-stairs",
            "title": "Climbing Stairs",
            "description": (
                "Read n (1 <= n <= 45). Each move climbs 1 or 2 steps. Print the\n"
                "number of distinct ways to reach the top."
            ),
            "difficulty": 5,
            "algorithm_types": ["dynamic_programming", "math"],
            "expected_complexity": "O(n)",
            "created_by": "seed",
            "test_cases": [
                _tc("1",  "1"),
                _tc("2",  "2"),
                _tc("3",  "3"),
                _tc("10", "89"),
                _tc("45", "1836311903"),
            ],
        },

        # ─────────────────────────────────────────────
        # number-of-islands | graph, bfs | 6
        # ─────────────────────────────────────────────
        {
            "problem_id": "number-of-islands",
            "title": "Number of Islands",
            "description": (
                "The first line holds rows and cols, followed by that many rows of\n"
                "'1' (land) and '0' (water). Print the number of islands, where an\n"
                "island is land connected horizontally or vertically."
            ),
            "difficulty": 6,
            "algorithm_types": ["graph", "bfs"],
            "expected_complexity": "O(rows * cols)",
            "created_by": "seed",
            "test_cases": [
                _tc("4 5\n11110\n11010\n11000\n00000", "1"),
                _tc("4 5\n11000\n11000\n00100\n00011", "3"),
                _tc("1 1\n0",                          "0"),
            ],
        },

        # ─────────────────────────────────────────────
        # longest-increasing-subsequence | dynamic_programming, binary_search | 8
        # ─────────────────────────────────────────────
        {
            "problem_id": "longest-increasing-subsequence",
            "title": "Longest Increasing Subsequence",
            "description": (
                "Read space-separated integers. Print the length of the longest\n"
                "strictly increasing subsequence. Aim for O(n log n)."
            ),
            "difficulty": 8,
            "algorithm_types": ["dynamic_programming", "binary_search"],
            "expected_complexity": "O(n log n)",
            "created_by": "seed",
            "test_cases": [
                _tc("10 9 2 5 3 7 101 18", "4"),
                _tc("0 1 0 3 2 3",         "4"),
                _tc("7 7 7 7 7",           "1"),
            ],
        },
    ]
