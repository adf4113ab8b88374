from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from debatetab.tournament.models import Member, Result, Round, SpeakerScore
from debatetab.tournament.results import (
    INCOMPLETE,
    RESOLVED,
    record_speaker_score,
    refresh_match_results,
    refresh_round_results,
)
from debatetab.tournament.tests.testutils import create_match, create_teams, create_tournament
from debatetab.tournament_core.exceptions import InvalidScoreException, PersistenceFailure


def members_of(team):
    return list(Member.objects.filter(team=team).order_by("name"))


def result_table(match):
    return [
        (result.team.name, result.rank, result.points)
        for result in Result.objects.filter(match=match).order_by("rank")
    ]


class RecordSpeakerScoreTestCase(TestCase):
    def setUp(self):
        self.tournament = create_tournament(fmt="AP")
        self.gov, self.opp = create_teams(self.tournament, 2)
        self.round = Round.objects.create(tournament=self.tournament, number=1)
        self.match = create_match(self.round, self.gov, self.opp)

    def _score_all(self, gov_points, opp_points):
        for member, points in zip(members_of(self.gov), gov_points):
            record_speaker_score(self.match, member, points)
        resolution = None
        for member, points in zip(members_of(self.opp), opp_points):
            _, resolution = record_speaker_score(self.match, member, points)
        return resolution

    def test_partial_scores_do_not_resolve(self):
        gov_lead, _ = members_of(self.gov)
        score, resolution = record_speaker_score(self.match, gov_lead, 75)
        self.assertEqual(score.points, 75)
        self.assertEqual(score.round, self.round)
        self.assertEqual(resolution.outcome, INCOMPLETE)
        self.assertFalse(resolution.is_resolved)
        self.assertFalse(Result.objects.exists())

    def test_complete_scores_resolve(self):
        resolution = self._score_all((75, 76), (70, 72))
        self.assertEqual(resolution.outcome, RESOLVED)
        self.assertEqual(
            result_table(self.match), [("Team 01", 1, 3), ("Team 02", 2, 2)]
        )

    def test_rescore_updates_in_place_and_re_resolves(self):
        self._score_all((75, 76), (70, 72))
        opp_lead = members_of(self.opp)[0]
        record_speaker_score(self.match, opp_lead, 90)

        self.assertEqual(SpeakerScore.objects.filter(match=self.match).count(), 4)
        self.assertEqual(
            SpeakerScore.objects.get(match=self.match, member=opp_lead).points, 90
        )
        self.assertEqual(
            result_table(self.match), [("Team 02", 1, 3), ("Team 01", 2, 2)]
        )

    def test_equal_totals_keep_position_order(self):
        self._score_all((75, 75), (74, 76))
        self.assertEqual(
            result_table(self.match), [("Team 01", 1, 3), ("Team 02", 2, 2)]
        )

    def test_out_of_range_scores_are_rejected(self):
        member = members_of(self.gov)[0]
        for points in (-1, 100.5, float("nan"), float("inf"), True, "75", None):
            with self.subTest(points=points):
                with self.assertRaises(InvalidScoreException):
                    record_speaker_score(self.match, member, points)
        self.assertFalse(SpeakerScore.objects.exists())

    def test_custom_range(self):
        self.tournament.min_speaker_score = 60
        self.tournament.max_speaker_score = 80
        self.tournament.save()
        match = create_match(self.round, self.gov, self.opp, pairing_order=2)
        member = members_of(self.gov)[0]
        with self.assertRaises(InvalidScoreException):
            record_speaker_score(match, member, 81)
        record_speaker_score(match, member, 80)

    def test_member_must_be_in_match(self):
        outsider = create_teams(create_tournament("Elsewhere", fmt="AP"), 1)[0]
        with self.assertRaises(InvalidScoreException):
            record_speaker_score(self.match, members_of(outsider)[0], 75)

    def test_database_errors_become_persistence_failures(self):
        member = members_of(self.gov)[0]
        with mock.patch.object(
            SpeakerScore.objects, "update_or_create", side_effect=DatabaseError("locked")
        ):
            with self.assertRaises(PersistenceFailure) as ctx:
                record_speaker_score(self.match, member, 75)
        self.assertEqual(ctx.exception.operation, "Recording speaker score")
        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)


class RefreshMatchResultsTestCase(TestCase):
    def setUp(self):
        self.tournament = create_tournament(fmt="BP")
        self.teams = create_teams(self.tournament, 4)
        self.round = Round.objects.create(tournament=self.tournament, number=1)
        self.match = create_match(self.round, *self.teams)

    def _score(self, team, *points):
        for member, value in zip(members_of(team), points):
            SpeakerScore.objects.create(
                member=member, match=self.match, round=self.round, points=value
            )

    def test_bp_ranks_and_points(self):
        self._score(self.teams[0], 40, 42)
        self._score(self.teams[1], 38, 39)
        self._score(self.teams[2], 45, 44)
        self._score(self.teams[3], 30, 33)

        resolution = refresh_match_results(self.match)
        self.assertTrue(resolution.is_resolved)
        self.assertEqual(
            result_table(self.match),
            [("Team 03", 1, 3), ("Team 01", 2, 2), ("Team 02", 3, 1), ("Team 04", 4, 0)],
        )
        self.assertEqual([tr.total for tr in resolution.ranks], [89, 82, 77, 63])

    def test_partially_scored_team_gets_no_result(self):
        self._score(self.teams[0], 40, 42)
        self._score(self.teams[1], 38, 39)
        self._score(self.teams[2], 45)

        refresh_match_results(self.match)
        self.assertEqual(
            result_table(self.match), [("Team 01", 1, 3), ("Team 02", 2, 2)]
        )

    def test_refresh_is_idempotent(self):
        self._score(self.teams[0], 40, 42)
        self._score(self.teams[1], 38, 39)
        refresh_match_results(self.match)
        first = result_table(self.match)
        refresh_match_results(self.match)
        self.assertEqual(result_table(self.match), first)
        self.assertEqual(Result.objects.filter(match=self.match).count(), 2)

    def test_incomplete_match_leaves_results_untouched(self):
        self._score(self.teams[0], 40, 42)
        self._score(self.teams[1], 38, 39)
        refresh_match_results(self.match)

        SpeakerScore.objects.filter(member__team=self.teams[1]).first().delete()
        resolution = refresh_match_results(self.match)
        self.assertEqual(resolution.outcome, INCOMPLETE)
        self.assertEqual(Result.objects.filter(match=self.match).count(), 2)

    def test_refresh_round_results(self):
        second = create_match(self.round, *self.teams[:2], pairing_order=2)
        self._score(self.teams[0], 40, 42)
        self._score(self.teams[1], 38, 39)

        resolutions = refresh_round_results(self.round)
        self.assertEqual(
            [(r.match_id, r.outcome) for r in resolutions],
            [(self.match.pk, RESOLVED), (second.pk, INCOMPLETE)],
        )

    def test_database_errors_become_persistence_failures(self):
        self._score(self.teams[0], 40, 42)
        self._score(self.teams[1], 38, 39)
        with mock.patch.object(
            Result.objects, "create", side_effect=DatabaseError("locked")
        ):
            with self.assertRaises(PersistenceFailure) as ctx:
                refresh_match_results(self.match)
        self.assertIn("match %s" % self.match.pk, str(ctx.exception))
        self.assertFalse(Result.objects.exists())

    def test_failed_refresh_keeps_previous_results(self):
        self._score(self.teams[0], 40, 42)
        self._score(self.teams[1], 38, 39)
        refresh_match_results(self.match)
        result_ids = list(
            Result.objects.filter(match=self.match).order_by("rank").values_list("pk", flat=True)
        )
        before = result_table(self.match)

        # A re-resolve would swap the two teams
        SpeakerScore.objects.filter(member__team=self.teams[1]).update(points=50)
        with mock.patch.object(
            Result.objects, "create", side_effect=DatabaseError("locked")
        ):
            with self.assertRaises(PersistenceFailure):
                refresh_match_results(self.match)

        self.assertEqual(result_table(self.match), before)
        self.assertEqual(
            list(
                Result.objects.filter(match=self.match)
                .order_by("rank")
                .values_list("pk", flat=True)
            ),
            result_ids,
        )
