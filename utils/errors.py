# utils/errors.py
# AlgoCoach — Exception taxonomy shared by the engine, stores and routes.
# Routes translate these into HTTPException; nothing below imports FastAPI.


class AlgoCoachError(Exception):
    """Base class for every error raised by AlgoCoach code."""


class InvalidInput(AlgoCoachError):
    """Malformed request or out-of-domain argument. Raised before side effects."""


class NotFound(AlgoCoachError):
    """Requested record (problem, user, submission) does not exist."""


class RunnerFailure(AlgoCoachError):
    """The code runner could not produce a result for one test case."""


class LLMCallError(AlgoCoachError):
    """Transport or protocol failure talking to the LLM provider."""


class AnalyzerFailure(AlgoCoachError):
    """Quality analysis failed. Callers fall back to a neutral coefficient."""


class PersistenceError(AlgoCoachError):
    """Writing the submission record failed. Fatal to the request."""


class ProfileUpdateFailure(AlgoCoachError):
    """A conditional write to the user profile could not be applied."""
