"""
Seed configuration for new users.

These values are copied into a user's own configuration the first time they use the
bot. The analysis code always receives configuration explicitly and never reads
these constants directly.
"""

from typing import Dict, List

from training_bot.service.session_analysis.common.data_models import (
    BodyPart,
    BodyPartCategory,
    ConfiguredSessionType,
    IntensityTier,
    Position,
    SessionTypeMapping,
    SessionTypeTag,
)

DEFAULT_BODY_PARTS: List[BodyPart] = [
    # Upper body
    BodyPart(id="shoulders", name="Shoulders", category=BodyPartCategory.UPPER, position=Position(x=50, y=20)),
    BodyPart(id="wrists", name="Wrists", category=BodyPartCategory.UPPER, position=Position(x=30, y=35)),
    BodyPart(id="elbows", name="Elbows", category=BodyPartCategory.UPPER, position=Position(x=40, y=30)),
    BodyPart(id="upper-back", name="Upper Back", category=BodyPartCategory.UPPER, position=Position(x=50, y=25)),
    # Core
    BodyPart(id="abs", name="Abs", category=BodyPartCategory.CORE, position=Position(x=50, y=45)),
    BodyPart(id="spine", name="Spine", category=BodyPartCategory.CORE, position=Position(x=50, y=40)),
    BodyPart(id="glutes", name="Glutes", category=BodyPartCategory.CORE, position=Position(x=50, y=55)),
    # Lower body
    BodyPart(id="hips", name="Hips", category=BodyPartCategory.LOWER, position=Position(x=50, y=60)),
    BodyPart(id="knees", name="Knees", category=BodyPartCategory.LOWER, position=Position(x=50, y=75)),
    BodyPart(id="ankles", name="Ankles", category=BodyPartCategory.LOWER, position=Position(x=50, y=90)),
]

DEFAULT_SESSION_TYPES: List[ConfiguredSessionType] = [
    ConfiguredSessionType(name="Mobility: Shoulder, elbow, and wrist", tag=SessionTypeTag.PREPARATION),
    ConfiguredSessionType(name="Mobility: Spine", tag=SessionTypeTag.PREPARATION),
    ConfiguredSessionType(name="Mobility: hip, knee, and ankle", tag=SessionTypeTag.PREPARATION),
    ConfiguredSessionType(name="Beginner handstands", tag=SessionTypeTag.STRENGTH),
    ConfiguredSessionType(name="Handstands", tag=SessionTypeTag.STRENGTH),
    ConfiguredSessionType(name="Press handstand", tag=SessionTypeTag.STRENGTH),
    ConfiguredSessionType(name="Handstand push-up", tag=SessionTypeTag.STRENGTH),
    ConfiguredSessionType(name="Abs and glutes", tag=SessionTypeTag.STRENGTH),
    ConfiguredSessionType(name="Power yoga", tag=SessionTypeTag.FLEXIBILITY),
    ConfiguredSessionType(name="Pilates", tag=SessionTypeTag.STRENGTH),
    ConfiguredSessionType(name="Back bends", tag=SessionTypeTag.FLEXIBILITY),
    ConfiguredSessionType(name="Single leg squat", tag=SessionTypeTag.STRENGTH),
    ConfiguredSessionType(name="Side splits", tag=SessionTypeTag.FLEXIBILITY),
    ConfiguredSessionType(name="Front splits", tag=SessionTypeTag.FLEXIBILITY),
    ConfiguredSessionType(name="Yin yoga", tag=SessionTypeTag.RECOVERY),
]

# Session type -> (body part ids, intensity)
_DEFAULT_MAPPING_SPEC: Dict[str, tuple] = {
    "Mobility: Shoulder, elbow, and wrist": (["shoulders", "elbows", "wrists"], IntensityTier.MEDIUM),
    "Mobility: Spine": (["spine", "upper-back"], IntensityTier.MEDIUM),
    "Mobility: hip, knee, and ankle": (["hips", "knees", "ankles"], IntensityTier.MEDIUM),
    "Beginner handstands": (["shoulders", "wrists", "abs"], IntensityTier.HIGH),
    "Handstands": (["shoulders", "wrists", "abs"], IntensityTier.HIGH),
    "Press handstand": (["shoulders", "abs", "hips"], IntensityTier.HIGH),
    "Handstand push-up": (["shoulders", "wrists", "abs"], IntensityTier.HIGH),
    "Abs and glutes": (["abs", "glutes"], IntensityTier.HIGH),
    "Power yoga": (["shoulders", "abs", "hips"], IntensityTier.MEDIUM),
    "Pilates": (["abs", "glutes", "spine"], IntensityTier.MEDIUM),
    "Back bends": (["spine", "shoulders", "hips"], IntensityTier.MEDIUM),
    "Single leg squat": (["glutes", "knees", "ankles"], IntensityTier.HIGH),
    "Side splits": (["hips", "glutes"], IntensityTier.MEDIUM),
    "Front splits": (["hips", "glutes"], IntensityTier.MEDIUM),
    "Yin yoga": (["spine", "hips"], IntensityTier.LOW),
}


def build_default_mappings(catalog: List[BodyPart] = None) -> List[SessionTypeMapping]:
    """
    Build the default session type mappings against a body part catalog.

    Args:
        catalog: Body parts to resolve ids against. Defaults to DEFAULT_BODY_PARTS.

    Returns:
        One SessionTypeMapping per default session type, in configuration order.
    """
    parts_by_id = {part.id: part for part in (catalog or DEFAULT_BODY_PARTS)}
    mappings = []
    for session_type, (part_ids, intensity) in _DEFAULT_MAPPING_SPEC.items():
        mappings.append(
            SessionTypeMapping(
                session_type=session_type,
                body_parts=[parts_by_id[part_id] for part_id in part_ids if part_id in parts_by_id],
                intensity=intensity,
            )
        )
    return mappings
