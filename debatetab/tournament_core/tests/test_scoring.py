"""
Tests for match score aggregation and rank resolution.
"""

import unittest

from debatetab.tournament_core.exceptions import IncompleteScores
from debatetab.tournament_core.formats import ASIAN_PARLIAMENTARY
from debatetab.tournament_core.scoring import (
    aggregate_match_scores,
    resolve_match,
    resolve_ranks,
)
from debatetab.tournament_core.structure import SpeakerScoreEntry, TeamTotal
from debatetab.tournament_core.tests.test_utils import match_scores


class AggregateScoresTests(unittest.TestCase):
    def test_totals_per_team(self):
        scores = match_scores(1, 1, (1, 40, 42), (2, 38, 39), (3, 45, 44), (4, 30, 33))
        totals = aggregate_match_scores(scores, "BP", team_order=[1, 2, 3, 4])
        self.assertEqual(
            [(tt.team_id, tt.total, tt.member_count) for tt in totals],
            [(1, 82, 2), (2, 77, 2), (3, 89, 2), (4, 63, 2)],
        )

    def test_partially_scored_team_is_excluded(self):
        scores = match_scores(1, 1, (1, 40, 42), (2, 38), (3, 45, 44))
        totals = aggregate_match_scores(scores, "BP", team_order=[1, 2, 3, 4])
        self.assertEqual([tt.team_id for tt in totals], [1, 3])

    def test_fewer_than_two_complete_teams(self):
        scores = match_scores(1, 1, (1, 40, 42), (2, 38))
        self.assertEqual(aggregate_match_scores(scores, "AP"), [])
        self.assertEqual(aggregate_match_scores([], "AP"), [])

    def test_repeated_member_keeps_last_score(self):
        scores = match_scores(1, 1, (1, 40, 42), (2, 38, 39))
        scores.append(SpeakerScoreEntry(11, 1, 1, 1, 30))
        totals = aggregate_match_scores(scores, "AP", team_order=[1, 2])
        self.assertEqual(totals[0].total, 72)
        self.assertEqual(totals[0].member_count, 2)

    def test_unlisted_teams_follow_in_appearance_order(self):
        scores = match_scores(1, 1, (3, 40, 40), (2, 40, 40), (1, 40, 40))
        totals = aggregate_match_scores(scores, "BP", team_order=[1])
        self.assertEqual([tt.team_id for tt in totals], [1, 3, 2])

    def test_three_speaker_format(self):
        fmt = ASIAN_PARLIAMENTARY.with_speakers(3)
        scores = match_scores(1, 1, (1, 70, 71, 72), (2, 75, 74))
        self.assertEqual(aggregate_match_scores(scores, fmt), [])

        scores += [SpeakerScoreEntry(23, 2, 1, 1, 73)]
        totals = aggregate_match_scores(scores, fmt, team_order=[1, 2])
        self.assertEqual([tt.total for tt in totals], [213, 222])


class ResolveRanksTests(unittest.TestCase):
    def test_bp_ranks_and_points(self):
        scores = match_scores(1, 1, (1, 40, 42), (2, 38, 39), (3, 45, 44), (4, 30, 33))
        ranks = resolve_match(scores, "BP", team_order=[1, 2, 3, 4])

        by_team = {tr.team_id: tr for tr in ranks}
        self.assertEqual([tr.team_id for tr in ranks], [3, 1, 2, 4])
        self.assertEqual(
            {team_id: (tr.rank, tr.points) for team_id, tr in by_team.items()},
            {1: (2, 2), 2: (3, 1), 3: (1, 3), 4: (4, 0)},
        )

    def test_ranks_are_a_permutation(self):
        scores = match_scores(1, 1, (1, 50, 50), (2, 10, 20), (3, 33, 34), (4, 60, 1))
        ranks = resolve_match(scores, "BP", team_order=[1, 2, 3, 4])
        self.assertEqual(sorted(tr.rank for tr in ranks), [1, 2, 3, 4])
        self.assertEqual(sum(tr.points for tr in ranks), 6)

    def test_ties_keep_position_order(self):
        totals = [TeamTotal(7, 80, 2), TeamTotal(5, 90, 2), TeamTotal(6, 80, 2), TeamTotal(8, 80, 2)]
        ranks = resolve_ranks(totals, "BP")
        self.assertEqual([(tr.team_id, tr.rank) for tr in ranks], [(5, 1), (7, 2), (6, 3), (8, 4)])
        self.assertEqual([tr.points for tr in ranks], [3, 2, 1, 0])

    def test_two_team_formats_use_top_of_table(self):
        scores = match_scores(1, 1, (1, 70, 70), (2, 75, 72))
        ranks = resolve_match(scores, "AP", team_order=[1, 2])
        self.assertEqual([(tr.team_id, tr.points) for tr in ranks], [(2, 3), (1, 2)])

        ranks = resolve_match(scores, "2vs2", team_order=[1, 2])
        self.assertEqual([(tr.team_id, tr.points) for tr in ranks], [(2, 3), (1, 2)])

    def test_partial_bp_match_resolves_complete_teams(self):
        scores = match_scores(1, 1, (1, 40, 42), (2, 38, 39), (3, 45, 44))
        ranks = resolve_match(scores, "BP", team_order=[1, 2, 3])
        self.assertEqual([(tr.team_id, tr.rank, tr.points) for tr in ranks], [(3, 1, 3), (1, 2, 2), (2, 3, 1)])

    def test_incomplete_match_resolves_to_nothing(self):
        scores = match_scores(1, 1, (1, 40, 42), (2, 38))
        self.assertEqual(resolve_match(scores, "AP", team_order=[1, 2]), [])

    def test_resolve_ranks_needs_two_teams(self):
        with self.assertRaises(IncompleteScores) as ctx:
            resolve_ranks([TeamTotal(1, 80, 2)], "AP")
        self.assertEqual(ctx.exception.complete_teams, 1)


if __name__ == "__main__":
    unittest.main()
