"""
Player record shared by the extractor, the freshness cache and the snapshot writer.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PlayerRecord(BaseModel):
    """One player's attributes and badge counts as shown on the detail page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=1)
    team: str = Field(..., min_length=1)
    position: Optional[str] = None
    height: Optional[str] = None
    overall_attribute: Optional[int] = None

    # Outside scoring
    close_shot: Optional[int] = None
    mid_range_shot: Optional[int] = None
    three_point_shot: Optional[int] = None
    free_throw: Optional[int] = None
    shot_iq: Optional[int] = Field(None, alias="shotIQ")
    offensive_consistency: Optional[int] = None

    # Inside scoring
    layup: Optional[int] = None
    standing_dunk: Optional[int] = None
    driving_dunk: Optional[int] = None
    post_hook: Optional[int] = None
    post_fade: Optional[int] = None
    post_control: Optional[int] = None
    draw_foul: Optional[int] = None
    hands: Optional[int] = None

    # Playmaking
    pass_accuracy: Optional[int] = None
    ball_handle: Optional[int] = None
    speed_with_ball: Optional[int] = None
    pass_iq: Optional[int] = Field(None, alias="passIQ")
    pass_vision: Optional[int] = None

    # Defense
    interior_defense: Optional[int] = None
    perimeter_defense: Optional[int] = None
    steal: Optional[int] = None
    block: Optional[int] = None
    help_defense_iq: Optional[int] = Field(None, alias="helpDefenseIQ")
    pass_perception: Optional[int] = None
    defensive_consistency: Optional[int] = None

    # Rebounding
    offensive_rebound: Optional[int] = None
    defensive_rebound: Optional[int] = None

    # Athleticism
    speed: Optional[int] = None
    agility: Optional[int] = None
    strength: Optional[int] = None
    vertical: Optional[int] = None
    stamina: Optional[int] = None
    hustle: Optional[int] = None
    overall_durability: Optional[int] = None

    # Badges
    legendary_badge_count: Optional[int] = None
    purple_badge_count: Optional[int] = None
    gold_badge_count: Optional[int] = None
    silver_badge_count: Optional[int] = None
    bronze_badge_count: Optional[int] = None
    badge_count: Optional[int] = None
    outside_scoring_badge_count: Optional[int] = None
    inside_scoring_badge_count: Optional[int] = None
    playmaking_badge_count: Optional[int] = None
    defensive_badge_count: Optional[int] = None
    rebounding_badge_count: Optional[int] = None
    general_offense_badge_count: Optional[int] = None
    all_around_badge_count: Optional[int] = None

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> "PlayerRecord":
        """Build a record from one entry of a snapshot file."""
        return cls.model_validate(data)

    def to_snapshot(self) -> Dict[str, Any]:
        """Project the record onto the snapshot field list, in order."""
        return {alias: getattr(self, FIELD_BY_ALIAS[alias]) for alias in SNAPSHOT_FIELDS}


FIELD_BY_ALIAS: Dict[str, str] = {
    field.alias or to_camel(name): name for name, field in PlayerRecord.model_fields.items()
}

# Field order of every snapshot file; stable across runs.
SNAPSHOT_FIELDS = (
    "name",
    "team",
    "position",
    "height",
    "overallAttribute",
    # Outside Scoring
    "closeShot",
    "midRangeShot",
    "threePointShot",
    "freeThrow",
    "shotIQ",
    "offensiveConsistency",
    # Inside Scoring
    "layup",
    "standingDunk",
    "drivingDunk",
    "postHook",
    "postFade",
    "postControl",
    "drawFoul",
    "hands",
    # Playmaking
    "passAccuracy",
    "ballHandle",
    "speedWithBall",
    "passIQ",
    "passVision",
    # Defense
    "interiorDefense",
    "perimeterDefense",
    "steal",
    "block",
    "helpDefenseIQ",
    "passPerception",
    "defensiveConsistency",
    # Rebounding
    "offensiveRebound",
    "defensiveRebound",
    # Athleticism
    "speed",
    "agility",
    "strength",
    "vertical",
    "stamina",
    "hustle",
    "overallDurability",
    # Badges
    "legendaryBadgeCount",
    "purpleBadgeCount",
    "goldBadgeCount",
    "silverBadgeCount",
    "bronzeBadgeCount",
    "badgeCount",
    "outsideScoringBadgeCount",
    "insideScoringBadgeCount",
    "playmakingBadgeCount",
    "defensiveBadgeCount",
    "reboundingBadgeCount",
    "generalOffenseBadgeCount",
    "allAroundBadgeCount",
)
