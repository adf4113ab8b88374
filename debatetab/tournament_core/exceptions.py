"""Exceptions raised by the debatetab pairing and standings engine."""


# ========== Base Exception ==========


class DebateTabException(Exception):
    """Base exception for all debatetab errors.

    Catching this class catches every error the engine and its store raise on
    purpose; anything else is a bug.
    """

    pass


# ========== Pairing Exceptions ==========


class PairingException(DebateTabException):
    """Base exception for pairing-related errors."""

    pass


class InsufficientTeams(PairingException):
    """Raised when fewer than two teams are available for pairing."""

    def __init__(self, team_count: int):
        self.team_count = team_count
        super().__init__(
            f"At least 2 teams are required to generate pairings, got {team_count}"
        )


class PairingsExistException(PairingException):
    """Raised when committing over existing pairings without overwrite."""

    pass


class PairingHasResultException(PairingException):
    """Raised when deleting pairings that already have speaker scores."""

    pass


class InvalidPairingException(PairingException):
    """Raised when a proposal does not fit the round it is committed to."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(DebateTabException):
    """Base exception for tournament configuration errors."""

    pass


class UnknownFormat(ConfigurationException, ValueError):
    """Raised when a tournament format is not in the format table."""

    def __init__(self, format_code):
        self.format_code = format_code
        super().__init__(f"Unknown tournament format: {format_code!r}")


# ========== Result Exceptions ==========


class ResultException(DebateTabException):
    """Base exception for score and result errors."""

    pass


class IncompleteScores(ResultException):
    """Not enough complete teams in a match to resolve ranks.

    This is the normal state while judges are still scoring; callers should
    re-trigger resolution after the next score write.
    """

    def __init__(self, complete_teams: int, match_id=None):
        self.complete_teams = complete_teams
        self.match_id = match_id
        where = f" in match {match_id}" if match_id is not None else ""
        super().__init__(
            f"Need at least 2 fully scored teams{where}, got {complete_teams}"
        )


class InvalidScoreException(ResultException):
    """Raised when a speaker score is out of range or for the wrong match."""

    pass


# ========== Persistence Exceptions ==========


class PersistenceFailure(DebateTabException):
    """A read or write against the store failed.

    The message names the operation and the round or match it concerned so
    the caller can decide whether to retry. The original database error is
    chained as ``__cause__``.
    """

    def __init__(self, operation: str, context: str = ""):
        self.operation = operation
        self.context = context
        message = f"{operation} failed"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)
