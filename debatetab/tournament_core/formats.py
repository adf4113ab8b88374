"""
Debate formats and their point tables.

A format fixes how many teams meet in one debate, which positions they take,
how many speakers each team fields, and how a finishing rank converts to
tournament points.
"""

from typing import Tuple, Union
from dataclasses import dataclass, field, replace

from debatetab.tournament_core.exceptions import UnknownFormat


@dataclass(frozen=True)
class PointTable:
    """Converts a rank within a debate to tournament points."""

    # points_by_rank[0] is awarded for rank 1, and so on
    points_by_rank: Tuple[int, ...] = (3, 2, 1, 0)

    def points_for_rank(self, rank: int) -> int:
        """Get points for a 1-based rank. Ranks beyond the table score 0."""
        if rank < 1:
            raise ValueError(f"Rank must be 1 or greater, got {rank}")
        if rank > len(self.points_by_rank):
            return 0
        return self.points_by_rank[rank - 1]

    @property
    def minimum(self) -> int:
        return min(self.points_by_rank, default=0)

    @property
    def maximum(self) -> int:
        return max(self.points_by_rank, default=0)


@dataclass(frozen=True)
class Format:
    """A debate format."""

    code: str
    name: str
    positions: Tuple[str, ...]
    speakers_per_team: int = 2
    point_table: PointTable = field(default_factory=PointTable)

    @property
    def group_size(self) -> int:
        """Number of teams in one full debate."""
        return len(self.positions)

    def position_index(self, position: str) -> int:
        """Get the order of a position within a debate."""
        try:
            return self.positions.index(position)
        except ValueError:
            raise ValueError(
                f"Position {position!r} is not used in format {self.code}"
            )

    def with_speakers(self, speakers_per_team: int) -> "Format":
        """Return a copy of this format expecting a different speaker count."""
        if speakers_per_team < 1:
            raise ValueError("A team needs at least one speaker")
        return replace(self, speakers_per_team=speakers_per_team)


# Pre-defined formats. The point tables are equal today but each format
# owns its own instance so they can diverge.
BRITISH_PARLIAMENTARY = Format(
    code="BP",
    name="British Parliamentary",
    positions=("OG", "OO", "CG", "CO"),
    point_table=PointTable((3, 2, 1, 0)),
)

ASIAN_PARLIAMENTARY = Format(
    code="AP",
    name="Asian Parliamentary",
    positions=("GOV", "OPP"),
    point_table=PointTable((3, 2, 1, 0)),
)

TWO_VS_TWO = Format(
    code="2vs2",
    name="Two versus two",
    positions=("AFF", "NEG"),
    point_table=PointTable((3, 2, 1, 0)),
)

FORMATS = {
    fmt.code: fmt for fmt in (BRITISH_PARLIAMENTARY, ASIAN_PARLIAMENTARY, TWO_VS_TWO)
}

FORMAT_CHOICES = tuple((fmt.code, fmt.name) for fmt in FORMATS.values())


def get_format(format_or_code: Union[str, Format]) -> Format:
    """Look up a format by its code. Format instances are returned unchanged."""
    if isinstance(format_or_code, Format):
        return format_or_code
    try:
        return FORMATS[format_or_code]
    except (KeyError, TypeError):
        raise UnknownFormat(format_or_code)
