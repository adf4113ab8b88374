import reversion
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from debatetab.tournament_core.formats import FORMAT_CHOICES, get_format
from debatetab.tournament_core.structure import LeftoverPolicy, MemberRole

LEFTOVER_POLICY_OPTIONS = (
    (LeftoverPolicy.PARTIAL.value, "Under-full final match"),
    (LeftoverPolicy.DROP.value, "Leave leftover teams unpaired"),
)

MEMBER_ROLE_OPTIONS = (
    (MemberRole.LEADER.value, "Leader"),
    (MemberRole.MEMBER.value, "Member"),
    (MemberRole.SUBSTITUTE.value, "Substitute"),
)


def default_leftover_policy():
    # Raises ValueError for a value outside LEFTOVER_POLICY_OPTIONS
    return LeftoverPolicy(
        getattr(settings, "DEBATETAB_DEFAULT_LEFTOVER_POLICY", LeftoverPolicy.PARTIAL.value)
    ).value


# -------------------------------------------------------------------------------
class _BaseModel(models.Model):
    date_created = models.DateTimeField(auto_now_add=True)
    date_modified = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# -------------------------------------------------------------------------------
@reversion.register()
class Tournament(_BaseModel):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100, unique=True)
    format = models.CharField(max_length=8, choices=FORMAT_CHOICES, default="BP")
    speakers_per_team = models.PositiveSmallIntegerField(
        default=2, validators=[MinValueValidator(1)]
    )
    min_speaker_score = models.FloatField(default=0)
    max_speaker_score = models.FloatField(default=100)
    leftover_policy = models.CharField(
        max_length=16, choices=LEFTOVER_POLICY_OPTIONS, default=default_leftover_policy
    )

    class Meta:
        ordering = ("name",)

    def clean(self):
        if self.min_speaker_score >= self.max_speaker_score:
            raise ValidationError(
                "Minimum speaker score must be lower than the maximum speaker score."
            )

    def engine_format(self):
        """The engine Format for this tournament, with its speaker count."""
        fmt = get_format(self.format)
        if fmt.speakers_per_team != self.speakers_per_team:
            fmt = fmt.with_speakers(self.speakers_per_team)
        return fmt

    def get_leftover_policy(self):
        return LeftoverPolicy(self.leftover_policy)

    def score_in_range(self, points):
        return self.min_speaker_score <= points <= self.max_speaker_score

    def __str__(self):
        return self.name


# -------------------------------------------------------------------------------
@reversion.register()
class Team(_BaseModel):
    tournament = models.ForeignKey(Tournament, on_delete=models.CASCADE)
    name = models.CharField(max_length=255)
    institution = models.CharField(max_length=255, blank=True)

    class Meta:
        unique_together = ("tournament", "name")
        ordering = ("name", "id")

    def __str__(self):
        return self.name


# -------------------------------------------------------------------------------
@reversion.register()
class Member(_BaseModel):
    team = models.ForeignKey(Team, on_delete=models.CASCADE)
    name = models.CharField(max_length=255)
    role = models.CharField(
        max_length=16, choices=MEMBER_ROLE_OPTIONS, default=MemberRole.MEMBER.value
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL
    )

    class Meta:
        ordering = ("name", "id")

    def __str__(self):
        return "%s (%s)" % (self.name, self.team.name)


# -------------------------------------------------------------------------------
@reversion.register()
class Round(_BaseModel):
    tournament = models.ForeignKey(Tournament, on_delete=models.CASCADE)
    number = models.PositiveIntegerField(verbose_name="round number")
    motion = models.TextField(blank=True)
    is_completed = models.BooleanField(default=False)

    class Meta:
        unique_together = ("tournament", "number")
        ordering = ("tournament", "number")

    def __str__(self):
        return "%s - Round %d" % (self.tournament, self.number)


# -------------------------------------------------------------------------------
@reversion.register()
class Match(_BaseModel):
    round = models.ForeignKey(Round, on_delete=models.CASCADE)
    pairing_order = models.PositiveIntegerField(default=1)

    class Meta:
        verbose_name_plural = "matches"
        ordering = ("round", "pairing_order", "id")

    def teams_in_position_order(self):
        fmt = self.round.tournament.engine_format()
        return sorted(
            self.matchteam_set.select_related("team"),
            key=lambda mt: fmt.position_index(mt.position),
        )

    def has_scores(self):
        return self.speakerscore_set.exists()

    def __str__(self):
        return "%s - Match %d" % (self.round, self.pairing_order)


# -------------------------------------------------------------------------------
@reversion.register()
class MatchTeam(_BaseModel):
    match = models.ForeignKey(Match, on_delete=models.CASCADE)
    team = models.ForeignKey(Team, on_delete=models.CASCADE)
    position = models.CharField(max_length=8)

    class Meta:
        unique_together = (("match", "position"), ("match", "team"))

    def clean(self):
        fmt = self.match.round.tournament.engine_format()
        if self.position not in fmt.positions:
            raise ValidationError(
                "Position %s is not used in format %s." % (self.position, fmt.code)
            )

    def __str__(self):
        return "%s (%s)" % (self.team, self.position)


# -------------------------------------------------------------------------------
@reversion.register()
class SpeakerScore(_BaseModel):
    member = models.ForeignKey(Member, on_delete=models.CASCADE)
    match = models.ForeignKey(Match, on_delete=models.CASCADE)
    round = models.ForeignKey(Round, on_delete=models.CASCADE)
    points = models.FloatField()

    class Meta:
        unique_together = ("member", "match")

    def clean(self):
        tournament = self.round.tournament
        if not tournament.score_in_range(self.points):
            raise ValidationError(
                "Speaker points must be between %s and %s."
                % (tournament.min_speaker_score, tournament.max_speaker_score)
            )

    def __str__(self):
        return "%s: %s" % (self.member.name, self.points)


# -------------------------------------------------------------------------------
@reversion.register()
class Result(_BaseModel):
    match = models.ForeignKey(Match, on_delete=models.CASCADE)
    team = models.ForeignKey(Team, on_delete=models.CASCADE)
    rank = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    points = models.SmallIntegerField()

    class Meta:
        unique_together = ("match", "team")
        ordering = ("match", "rank")

    def __str__(self):
        return "%s: rank %d, %d points" % (self.team, self.rank, self.points)
