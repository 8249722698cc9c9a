"""
Outcome Resolver - weighted-random classification of combat effects.

A threshold (derived from character attributes) is compared against a d100
style roll in [0, 100). The roll space is split into up to three buckets:

    [0, favorable_edge]            -> favorable
    (favorable_edge, worst_edge)   -> middle
    [worst_edge, 100)              -> worst

where worst_edge = 80 + 0.2 * threshold. The worst tier is therefore only a
"bad luck" tail behind a failed primary check, and that tail shrinks as the
threshold grows. Two-outcome rolls have no worst bucket and use a strict
comparison (roll < threshold) for the favorable edge.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from .outcomes import Distance, ShrapnelPresence, Tier, to_distance

logger = logging.getLogger(__name__)

ROLL_CEILING = 100.0

# Secondary ceiling: worst_edge = WORST_EDGE_BASE + WORST_EDGE_SLOPE * threshold
WORST_EDGE_BASE = 80.0
WORST_EDGE_SLOPE = 0.2

# Shrapnel uses fixed odds rather than attributes. A unit roll below the
# cutoff means no shrapnel: 70% "is" at close range, 25% "is" at medium range.
SHRAPNEL_MISS_CUTOFF = {
    Distance.CLOSE: 0.3,
    Distance.MEDIUM: 0.75,
}


def worst_threshold(threshold: float) -> float:
    """Secondary ceiling separating the middle tier from the worst tier."""
    return WORST_EDGE_BASE + (WORST_EDGE_SLOPE * threshold)


def _clamp_roll(value: float) -> float:
    return min(max(value, 0.0), ROLL_CEILING)


@dataclass(frozen=True)
class OutcomeBuckets:
    """Explicit discrete distribution over outcome tiers for one threshold."""

    threshold: float
    three_way: bool = True

    @property
    def favorable_edge(self) -> float:
        return self.threshold

    @property
    def worst_edge(self) -> Optional[float]:
        if not self.three_way:
            return None
        return worst_threshold(self.threshold)

    def classify(self, roll: float) -> Tier:
        """Map a roll in [0, 100) onto a tier."""
        if not self.three_way:
            return Tier.FAVORABLE if roll < self.favorable_edge else Tier.MIDDLE

        if roll <= self.favorable_edge:
            return Tier.FAVORABLE
        if roll < self.worst_edge:
            return Tier.MIDDLE
        return Tier.WORST

    def probabilities(self) -> Dict[Tier, float]:
        """
        Analytic probability of each tier for a uniform roll in [0, 100).

        Bucket edges are clamped into the roll space, so thresholds outside
        0-100 degrade to certain outcomes instead of negative probabilities.
        """
        favorable_end = _clamp_roll(self.favorable_edge)
        if not self.three_way:
            return {
                Tier.FAVORABLE: favorable_end / ROLL_CEILING,
                Tier.MIDDLE: (ROLL_CEILING - favorable_end) / ROLL_CEILING,
            }

        # A worst edge below the favorable edge leaves no room for middle
        middle_end = _clamp_roll(max(self.worst_edge, self.favorable_edge))
        return {
            Tier.FAVORABLE: favorable_end / ROLL_CEILING,
            Tier.MIDDLE: (middle_end - favorable_end) / ROLL_CEILING,
            Tier.WORST: (ROLL_CEILING - middle_end) / ROLL_CEILING,
        }


class Resolution(BaseModel):
    """
    Audit record of a single resolver draw.

    effect and distance are filled in by the reaction composer so a host can
    replay or inspect every roll behind a rendered scenario.
    """

    model_config = ConfigDict(frozen=True)

    label: Any
    tier: Tier
    roll: float
    threshold: float
    worst_threshold: Optional[float] = None
    effect: Optional[str] = None
    distance: Optional[Distance] = None


def draw_roll(rng: Optional[random.Random] = None) -> float:
    """Uniform roll in [0, 100)."""
    source = rng if rng is not None else random
    return source.random() * ROLL_CEILING


def resolve_detailed(
    threshold: float,
    favorable: Any,
    middle: Any,
    worst: Any = None,
    rng: Optional[random.Random] = None,
) -> Resolution:
    """
    Resolve an outcome and keep the roll that produced it.

    Args:
        threshold: Favorable cutoff on the 0-100 roll scale (not range-checked)
        favorable: Label returned when the roll beats the threshold
        middle: Label returned on a failed check
        worst: Optional label for the bad-luck tail of a failed check
        rng: Random source; defaults to the module-level generator

    Returns:
        Resolution with the chosen label, its tier and the raw roll

    Raises:
        ValueError: If threshold is NaN
    """
    # NaN is the only value not equal to itself, whatever its numeric type
    if threshold != threshold:
        raise ValueError("Outcome threshold is NaN; validate attributes first")

    buckets = OutcomeBuckets(threshold=threshold, three_way=worst is not None)
    roll = draw_roll(rng)
    tier = buckets.classify(roll)
    label = {Tier.FAVORABLE: favorable, Tier.MIDDLE: middle, Tier.WORST: worst}[tier]

    logger.debug(
        f"Resolved {getattr(label, 'value', label)!r} "
        f"(roll={roll:.2f}, threshold={threshold:.2f}, tier={tier.value})"
    )

    return Resolution(
        label=label,
        tier=tier,
        roll=roll,
        threshold=threshold,
        worst_threshold=buckets.worst_edge,
    )


def resolve(
    threshold: float,
    favorable: Any,
    middle: Any,
    worst: Any = None,
    rng: Optional[random.Random] = None,
) -> Any:
    """Resolve an outcome, returning only the chosen label."""
    return resolve_detailed(threshold, favorable, middle, worst, rng=rng).label


def determine_shrapnel_presence(
    distance: Distance, rng: Optional[random.Random] = None
) -> Optional[ShrapnelPresence]:
    """
    Decide whether shrapnel is directed at the character.

    Only close and medium blasts throw shrapnel far enough to matter; long
    range returns None without drawing.
    """
    distance = to_distance(distance)
    cutoff = SHRAPNEL_MISS_CUTOFF.get(distance)
    if cutoff is None:
        return None

    source = rng if rng is not None else random
    roll = source.random()
    return ShrapnelPresence.IS_NOT if roll < cutoff else ShrapnelPresence.IS
