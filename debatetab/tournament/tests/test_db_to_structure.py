"""
Tests for database to tournament_core structure transformations.
"""

from django.db import DatabaseError
from django.test import TestCase

from debatetab.tournament.db_to_structure import (
    match_scores,
    match_team_order,
    member_roster,
    persistence_guard,
    prior_results,
    team_roster,
    tournament_to_structure,
)
from debatetab.tournament.models import Match, Round
from debatetab.tournament.tests.testutils import ap_tournament_builder
from debatetab.tournament_core.exceptions import PersistenceFailure
from debatetab.tournament_core.structure import MemberRole
from debatetab.tournament_core.tests.test_utils import create_ap_builder


class DbToStructureTests(TestCase):
    """Test conversion of database models to tournament_core structure."""

    def setUp(self):
        self.builder = ap_tournament_builder()
        self.tournament = self.builder.tournament

    def test_team_roster(self):
        roster = team_roster(self.tournament)
        self.assertEqual([t.name for t in roster], ["Alpha", "Bravo", "Charlie", "Delta"])
        self.assertEqual(roster[0].team_id, self.builder.db_team("Alpha").pk)
        self.assertEqual(roster[0].institution, "Alpha College")
        self.assertIsNone(roster[2].institution)

    def test_member_roster(self):
        members = {m.name: m for m in member_roster(self.tournament)}
        self.assertEqual(len(members), 8)
        self.assertEqual(members["Ann"].role, MemberRole.LEADER)
        self.assertEqual(members["Abe"].role, MemberRole.MEMBER)
        self.assertEqual(members["Abe"].team_id, self.builder.db_team("Alpha").pk)

    def test_prior_results(self):
        self.assertEqual(len(prior_results(self.tournament)), 8)

        before_two = prior_results(self.tournament, before_round=2)
        self.assertEqual(len(before_two), 4)
        self.assertTrue(all(r.round_number == 1 for r in before_two))
        self.assertEqual(prior_results(self.tournament, before_round=1), [])

        charlie = self.builder.db_team("Charlie").pk
        self.assertEqual(
            [(r.rank, r.points) for r in before_two if r.team_id == charlie], [(1, 3)]
        )

    def test_match_team_order_and_scores(self):
        round_two = self.builder.db_round(2)
        match = Match.objects.get(round=round_two, pairing_order=1)
        alpha = self.builder.db_team("Alpha").pk
        charlie = self.builder.db_team("Charlie").pk
        self.assertEqual(match_team_order(match), [alpha, charlie])

        scores = match_scores(match)
        self.assertEqual(len(scores), 4)
        self.assertEqual(
            sorted((s.team_id, s.points) for s in scores),
            sorted([(alpha, 41), (alpha, 41), (charlie, 44), (charlie, 46)]),
        )
        self.assertTrue(all(s.round_number == 2 for s in scores))

    def test_tournament_to_structure(self):
        structure = tournament_to_structure(self.tournament)
        self.assertEqual(structure.format.code, "AP")
        self.assertEqual([r.number for r in structure.rounds], [1, 2])
        self.assertEqual([len(r.matches) for r in structure.rounds], [2, 2])

        first = structure.get_round(1).matches[0]
        self.assertEqual([position for _, position in first.teams], ["GOV", "OPP"])
        self.assertEqual(len(first.scores), 4)
        self.assertEqual([r.rank for r in first.results], [1, 2])

    def test_structure_matches_in_memory_standings(self):
        structure = tournament_to_structure(self.tournament)
        expected = create_ap_builder().build()

        def team_rows(tournament):
            return [
                (s.rank, s.name, s.total_points, s.total_speaker_score)
                for s in tournament.calculate_team_standings()
            ]

        def speaker_rows(tournament):
            return [
                (s.rank, s.name, s.total_points, s.standard_deviation)
                for s in tournament.calculate_speaker_standings()
            ]

        self.assertEqual(team_rows(structure), team_rows(expected))
        self.assertEqual(speaker_rows(structure), speaker_rows(expected))

    def test_empty_round_is_included(self):
        Round.objects.create(tournament=self.tournament, number=3, motion="THW test")
        structure = tournament_to_structure(self.tournament)
        self.assertEqual(structure.get_round(3).matches, [])
        self.assertEqual(structure.get_round(3).motion, "THW test")


class PersistenceGuardTests(TestCase):
    def test_database_error_is_wrapped(self):
        with self.assertRaises(PersistenceFailure) as ctx:
            with persistence_guard("Reading results", "round 3"):
                raise DatabaseError("connection lost")
        self.assertEqual(str(ctx.exception), "Reading results failed (round 3)")
        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)

    def test_other_errors_pass_through(self):
        with self.assertRaises(KeyError):
            with persistence_guard("Reading results"):
                raise KeyError("missing")
