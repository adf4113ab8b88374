"""
Tests for debate formats and point tables.
"""

import unittest

from debatetab.tournament_core.exceptions import UnknownFormat
from debatetab.tournament_core.formats import (
    ASIAN_PARLIAMENTARY,
    BRITISH_PARLIAMENTARY,
    TWO_VS_TWO,
    PointTable,
    get_format,
)


class FormatTests(unittest.TestCase):
    def test_group_sizes_and_positions(self):
        self.assertEqual(BRITISH_PARLIAMENTARY.group_size, 4)
        self.assertEqual(BRITISH_PARLIAMENTARY.positions, ("OG", "OO", "CG", "CO"))
        self.assertEqual(ASIAN_PARLIAMENTARY.group_size, 2)
        self.assertEqual(ASIAN_PARLIAMENTARY.positions, ("GOV", "OPP"))
        self.assertEqual(TWO_VS_TWO.positions, ("AFF", "NEG"))

    def test_get_format_by_code(self):
        self.assertIs(get_format("BP"), BRITISH_PARLIAMENTARY)
        self.assertIs(get_format("AP"), ASIAN_PARLIAMENTARY)
        self.assertIs(get_format("2vs2"), TWO_VS_TWO)
        self.assertIs(get_format(ASIAN_PARLIAMENTARY), ASIAN_PARLIAMENTARY)

    def test_unknown_format(self):
        with self.assertRaises(UnknownFormat) as ctx:
            get_format("WSDC")
        self.assertEqual(ctx.exception.format_code, "WSDC")
        # Configuration errors are also plain ValueErrors
        with self.assertRaises(ValueError):
            get_format(None)

    def test_position_index(self):
        self.assertEqual(BRITISH_PARLIAMENTARY.position_index("CG"), 2)
        with self.assertRaises(ValueError):
            BRITISH_PARLIAMENTARY.position_index("GOV")

    def test_with_speakers_returns_copy(self):
        three = ASIAN_PARLIAMENTARY.with_speakers(3)
        self.assertEqual(three.speakers_per_team, 3)
        self.assertEqual(ASIAN_PARLIAMENTARY.speakers_per_team, 2)
        self.assertEqual(three.positions, ASIAN_PARLIAMENTARY.positions)
        with self.assertRaises(ValueError):
            ASIAN_PARLIAMENTARY.with_speakers(0)


class PointTableTests(unittest.TestCase):
    def test_standard_table(self):
        table = BRITISH_PARLIAMENTARY.point_table
        self.assertEqual(
            [table.points_for_rank(rank) for rank in range(1, 6)], [3, 2, 1, 0, 0]
        )
        self.assertEqual(table.minimum, 0)
        self.assertEqual(table.maximum, 3)

    def test_formats_own_their_tables(self):
        self.assertEqual(
            BRITISH_PARLIAMENTARY.point_table, ASIAN_PARLIAMENTARY.point_table
        )
        self.assertIsNot(
            BRITISH_PARLIAMENTARY.point_table, ASIAN_PARLIAMENTARY.point_table
        )

    def test_custom_table(self):
        table = PointTable((1, 0))
        self.assertEqual(table.points_for_rank(1), 1)
        self.assertEqual(table.points_for_rank(2), 0)
        self.assertEqual(table.points_for_rank(3), 0)

    def test_invalid_rank(self):
        with self.assertRaises(ValueError):
            PointTable().points_for_rank(0)


if __name__ == "__main__":
    unittest.main()
