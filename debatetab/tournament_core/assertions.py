"""
Fluent assertion interface for testing tournament standings.

This module provides a clean, fluent way to assert team and speaker standings
for testing purposes. It works with the pure Python tournament_core structures.

Example:
    assert_tournament(tournament).team("Oxford A").assert_().points(3).position(1)
    assert_tournament(tournament).speaker("Alice").assert_().total(40).rounds(1)
"""

from typing import List, Optional, Union
from dataclasses import dataclass

from debatetab.tournament_core.structure import (
    SpeakerStanding,
    TeamStanding,
    Tournament,
)

# Floating point tolerance for score comparisons
TOLERANCE = 0.0001


@dataclass
class StandingsAssertion:
    """Fluent interface for asserting tournament standings."""

    tournament: Tournament
    _team_standings: Optional[List[TeamStanding]] = None
    _speaker_standings: Optional[List[SpeakerStanding]] = None

    def __post_init__(self):
        """Calculate standings once on initialization."""
        if self._team_standings is None:
            self._team_standings = self.tournament.calculate_team_standings()
        if self._speaker_standings is None:
            self._speaker_standings = self.tournament.calculate_speaker_standings()

    def team(self, name: str) -> "TeamAssertion":
        """Select a team by name for assertions."""
        for standing in self._team_standings:
            if standing.name == name:
                return TeamAssertion(standing)
        raise AssertionError(f"Team '{name}' not found in standings")

    def speaker(self, name: str) -> "SpeakerAssertion":
        """Select a speaker by name for assertions."""
        for standing in self._speaker_standings:
            if standing.name == name:
                return SpeakerAssertion(standing)
        raise AssertionError(f"Speaker '{name}' not found in standings")

    def team_order(self, *names: str) -> "StandingsAssertion":
        """Assert the leading teams of the standings, in order."""
        actual = [standing.name for standing in self._team_standings[: len(names)]]
        if actual != list(names):
            raise AssertionError(f"Expected team order {list(names)}, got {actual}")
        return self

    def speaker_order(self, *names: str) -> "StandingsAssertion":
        """Assert the leading speakers of the standings, in order."""
        actual = [standing.name for standing in self._speaker_standings[: len(names)]]
        if actual != list(names):
            raise AssertionError(f"Expected speaker order {list(names)}, got {actual}")
        return self

    def total_points(self, expected: int) -> "StandingsAssertion":
        """Assert the sum of team points across the standings."""
        actual = sum(standing.total_points for standing in self._team_standings)
        if actual != expected:
            raise AssertionError(f"Expected {expected} team points in total, got {actual}")
        return self


def _check(label: str, name: str, expected: Union[int, float], actual: Union[int, float]):
    if abs(actual - expected) > TOLERANCE:
        raise AssertionError(f"{name} expected {expected} {label}, got {actual}")


@dataclass
class TeamAssertion:
    standing: TeamStanding

    def assert_(self) -> "TeamAssertion":
        """Start a chain of assertions for this team."""
        return self

    def points(self, expected: int) -> "TeamAssertion":
        _check("points", self.standing.name, expected, self.standing.total_points)
        return self

    def speaker_score(self, expected: float) -> "TeamAssertion":
        _check(
            "total speaker score",
            self.standing.name,
            expected,
            self.standing.total_speaker_score,
        )
        return self

    def average_speaker_score(self, expected: float) -> "TeamAssertion":
        _check(
            "average speaker score",
            self.standing.name,
            expected,
            self.standing.average_speaker_score,
        )
        return self

    def matches(self, expected: int) -> "TeamAssertion":
        _check("scored matches", self.standing.name, expected, self.standing.matches_scored)
        return self

    def position(self, expected: int) -> "TeamAssertion":
        """Assert the final position in standings."""
        if self.standing.rank != expected:
            raise AssertionError(
                f"{self.standing.name} expected position {expected}, got {self.standing.rank}"
            )
        return self


@dataclass
class SpeakerAssertion:
    standing: SpeakerStanding

    def assert_(self) -> "SpeakerAssertion":
        """Start a chain of assertions for this speaker."""
        return self

    def total(self, expected: float) -> "SpeakerAssertion":
        _check("total points", self.standing.name, expected, self.standing.total_points)
        return self

    def average(self, expected: float) -> "SpeakerAssertion":
        _check("average points", self.standing.name, expected, self.standing.average_points)
        return self

    def rounds(self, expected: int) -> "SpeakerAssertion":
        _check("rounds", self.standing.name, expected, self.standing.rounds_participated)
        return self

    def deviation(self, expected: float) -> "SpeakerAssertion":
        _check(
            "standard deviation",
            self.standing.name,
            expected,
            self.standing.standard_deviation,
        )
        return self

    def position(self, expected: int) -> "SpeakerAssertion":
        if self.standing.rank != expected:
            raise AssertionError(
                f"{self.standing.name} expected position {expected}, got {self.standing.rank}"
            )
        return self


def assert_tournament(tournament: Tournament) -> StandingsAssertion:
    """Entry point for tournament assertions."""
    return StandingsAssertion(tournament)
