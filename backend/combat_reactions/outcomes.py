"""
Outcome vocabularies for combat reactions.

Each family is a closed, ordered set of labels (favorable first). The string
values are the exact words rendered into the scenario text.
"""

from enum import Enum


class Distance(str, Enum):
    """Spatial context of a combat stimulus."""

    CLOSE = "close"
    MEDIUM = "medium"
    LONG = "long"


# Composition order for every ranged stimulus
DISTANCES = (Distance.CLOSE, Distance.MEDIUM, Distance.LONG)


class Tier(str, Enum):
    """Position of a resolved label within its family."""

    FAVORABLE = "favorable"
    MIDDLE = "middle"
    WORST = "worst"


class BlastEffect(str, Enum):
    UNPHASED = "unphased"
    FLINCH = "flinch"
    CONCUSSED = "concussed"
    INCAPACITATED = "incapacitated"


class ShrapnelPresence(str, Enum):
    IS = "is"
    IS_NOT = "is not"


class ProjectileHit(str, Enum):
    UNHARMED = "unharmed"
    WOUNDED = "wounded"
    KILLED = "killed"


class WoundSeverity(str, Enum):
    LIGHT = "light"
    SEVERE = "severe"
    MORTAL = "mortal"


class MentalEffect(str, Enum):
    UNPHASED = "unphased"
    NUMBED = "numbed by adrenaline"  # wounded stand-in for UNPHASED
    SUPPRESSED = "suppressed"
    SHOCKED = "shocked"


class Effectiveness(str, Enum):
    """Retaliation (return fire) and melee effectiveness."""

    EFFECTIVELY = "effectively"
    INEFFECTIVELY = "ineffectively"


# (favorable, middle, worst) per distance; worst is None for two-outcome rolls
BLAST_TIERS = {
    Distance.CLOSE: (BlastEffect.FLINCH, BlastEffect.CONCUSSED, BlastEffect.INCAPACITATED),
    Distance.MEDIUM: (BlastEffect.UNPHASED, BlastEffect.FLINCH, BlastEffect.CONCUSSED),
    Distance.LONG: (BlastEffect.UNPHASED, BlastEffect.FLINCH, None),
}

HIT_TIERS = (ProjectileHit.UNHARMED, ProjectileHit.WOUNDED, ProjectileHit.KILLED)
SEVERITY_TIERS = (WoundSeverity.LIGHT, WoundSeverity.SEVERE, WoundSeverity.MORTAL)
WOUNDED_MENTAL_TIERS = (MentalEffect.NUMBED, MentalEffect.SUPPRESSED, MentalEffect.SHOCKED)
UNWOUNDED_MENTAL_TIERS = (MentalEffect.UNPHASED, MentalEffect.SUPPRESSED, None)
EFFECTIVENESS_TIERS = (Effectiveness.EFFECTIVELY, Effectiveness.INEFFECTIVELY, None)


def to_distance(value) -> Distance:
    """Coerce a Distance or its string value, failing fast on anything else."""
    if isinstance(value, Distance):
        return value
    try:
        return Distance(str(value).lower())
    except ValueError:
        raise ValueError(
            f"Unknown distance: {value!r}. Expected one of "
            f"{[d.value for d in Distance]}"
        )
