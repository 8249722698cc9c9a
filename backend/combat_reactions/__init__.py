"""
Combat reaction engine.

Resolves weighted-random reactions to explosions, projectiles and melee from
a character's attributes and renders them as instructions appended to a
host-owned scenario text.
"""

from .attributes import ATTRIBUTE_NAMES, AttributeSet, InvalidAttributeSetError
from .host import apply_modern_combat
from .outcome_resolver import (
    OutcomeBuckets,
    Resolution,
    determine_shrapnel_presence,
    resolve,
    resolve_detailed,
)
from .outcomes import Distance, Tier
from .reaction_composer import ReactionComposer, compose_reactions
from .scenario import ScenarioBuffer
from .thresholds import ThresholdTable, ThresholdTableError

__all__ = [
    "ATTRIBUTE_NAMES",
    "AttributeSet",
    "InvalidAttributeSetError",
    "apply_modern_combat",
    "OutcomeBuckets",
    "Resolution",
    "determine_shrapnel_presence",
    "resolve",
    "resolve_detailed",
    "Distance",
    "Tier",
    "ReactionComposer",
    "compose_reactions",
    "ScenarioBuffer",
    "ThresholdTable",
    "ThresholdTableError",
]
