"""
Reaction Composer - turns resolved outcomes into scenario instructions.

For one character it resolves, in a fixed order:

1. Explosive reactions at close, medium and long range
2. Projectile reactions at close, medium and long range
   (hit -> wound severity if wounded -> mental effect -> retaliation;
   a killing hit stops the chain)
3. A single melee reaction

Resolution (random draws) and rendering (string templates) are kept apart so
each can be tested on its own. Rendered text keeps the character placeholder
for the host to substitute.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple, Union

from . import settings
from .attributes import AttributeSet
from .outcome_resolver import Resolution, determine_shrapnel_presence, resolve_detailed
from .outcomes import (
    BLAST_TIERS,
    DISTANCES,
    EFFECTIVENESS_TIERS,
    HIT_TIERS,
    SEVERITY_TIERS,
    UNWOUNDED_MENTAL_TIERS,
    WOUNDED_MENTAL_TIERS,
    BlastEffect,
    Distance,
    Effectiveness,
    MentalEffect,
    ProjectileHit,
    ShrapnelPresence,
    WoundSeverity,
    to_distance,
)
from .scenario import ScenarioBuffer
from .thresholds import (
    ThresholdTable,
    blast_threshold,
    get_threshold_table,
    hit_evasion_threshold,
    melee_threshold,
    mental_stability_threshold,
    retaliation_threshold,
    wound_severity_threshold,
)

logger = logging.getLogger(__name__)

RANGE_PREFIXES = {
    Distance.CLOSE: "- Close range: ",
    Distance.MEDIUM: "- Medium range: ",
    Distance.LONG: "- Long range: ",
}


@dataclass(frozen=True)
class ExplosiveOutcome:
    distance: Distance
    blast: BlastEffect
    shrapnel: Optional[ShrapnelPresence] = None  # None at long range


@dataclass(frozen=True)
class ProjectileOutcome:
    distance: Distance
    hit: ProjectileHit
    severity: Optional[WoundSeverity] = None
    mental: Optional[MentalEffect] = None
    retaliation: Optional[Effectiveness] = None

    @property
    def killed(self) -> bool:
        return self.hit == ProjectileHit.KILLED

    @property
    def wounded(self) -> bool:
        return self.hit == ProjectileHit.WOUNDED


@dataclass(frozen=True)
class MeleeOutcome:
    effectiveness: Effectiveness


def range_prefix(distance: Distance) -> str:
    return RANGE_PREFIXES[to_distance(distance)]


def render_explosive(outcome: ExplosiveOutcome) -> str:
    """Render one explosive reaction line."""
    reaction = range_prefix(outcome.distance)
    reaction += f"{outcome.blast.value} from the blast"

    if outcome.shrapnel is None:
        return reaction + ".\n"

    return reaction + f", and shrapnel (projectile) {outcome.shrapnel.value} directed at them.\n"


def render_projectile(outcome: ProjectileOutcome, char_token: Optional[str] = None) -> str:
    """Render one projectile reaction line, stopping after a killing hit."""
    char_token = settings.CHAR_TOKEN if char_token is None else char_token

    reaction = range_prefix(outcome.distance)
    reaction += f"Will be {outcome.hit.value} by the projectile."
    if outcome.killed:
        return reaction + "\n"

    if outcome.wounded:
        reaction += f" The wound is {outcome.severity.value}."

    reaction += f" {char_token} will be {outcome.mental.value}."
    reaction += (
        f" If it makes sense to return fire, they will do so "
        f"{outcome.retaliation.value}."
    )
    return reaction + "\n"


def render_melee(outcome: MeleeOutcome, char_token: Optional[str] = None) -> str:
    char_token = settings.CHAR_TOKEN if char_token is None else char_token
    return f"# In melee combat, {char_token} should fight {outcome.effectiveness.value}.\n"


class ReactionComposer:
    """Resolves and renders every combat reaction for one attribute set."""

    def __init__(
        self,
        attributes: Union[AttributeSet, Mapping[str, Any]],
        rng: Optional[random.Random] = None,
        table: Optional[ThresholdTable] = None,
        char_token: Optional[str] = None,
    ):
        self.attributes = AttributeSet.from_mapping(attributes)
        if rng is None and settings.SEED is not None:
            rng = random.Random(settings.SEED)
        self.rng = rng
        self.table = table if table is not None else get_threshold_table()
        self.char_token = settings.CHAR_TOKEN if char_token is None else char_token
        # Every draw made by this composer, in draw order
        self.resolutions: List[Resolution] = []

    def _resolve(
        self,
        effect: str,
        distance: Optional[Distance],
        threshold: float,
        tiers: Tuple[Any, Any, Any],
    ) -> Resolution:
        favorable, middle, worst = tiers
        resolution = resolve_detailed(
            threshold, favorable, middle, worst, rng=self.rng
        ).model_copy(update={"effect": effect, "distance": distance})
        self.resolutions.append(resolution)

        return resolution

    # Resolution

    def resolve_explosive(self, distance: Distance) -> ExplosiveOutcome:
        distance = to_distance(distance)
        threshold = blast_threshold(self.attributes, distance, self.table)
        blast = self._resolve("blast", distance, threshold, BLAST_TIERS[distance]).label
        shrapnel = determine_shrapnel_presence(distance, rng=self.rng)
        return ExplosiveOutcome(distance=distance, blast=blast, shrapnel=shrapnel)

    def resolve_projectile(self, distance: Distance) -> ProjectileOutcome:
        distance = to_distance(distance)
        attrs, table = self.attributes, self.table

        hit = self._resolve(
            "hit_evasion", distance, hit_evasion_threshold(attrs, distance, table), HIT_TIERS
        ).label
        if hit == ProjectileHit.KILLED:
            return ProjectileOutcome(distance=distance, hit=hit)

        severity = None
        if hit == ProjectileHit.WOUNDED:
            severity = self._resolve(
                "wound_severity",
                distance,
                wound_severity_threshold(attrs, distance, table),
                SEVERITY_TIERS,
            ).label

        wounded = hit == ProjectileHit.WOUNDED
        mental_tiers = WOUNDED_MENTAL_TIERS if wounded else UNWOUNDED_MENTAL_TIERS
        mental = self._resolve(
            "mental_stability",
            distance,
            mental_stability_threshold(attrs, distance, table),
            mental_tiers,
        ).label

        retaliation = self._resolve(
            "retaliation",
            distance,
            retaliation_threshold(attrs, distance, table),
            EFFECTIVENESS_TIERS,
        ).label

        return ProjectileOutcome(
            distance=distance,
            hit=hit,
            severity=severity,
            mental=mental,
            retaliation=retaliation,
        )

    def resolve_melee(self) -> MeleeOutcome:
        threshold = melee_threshold(self.attributes, self.table)
        effectiveness = self._resolve("melee", None, threshold, EFFECTIVENESS_TIERS).label
        return MeleeOutcome(effectiveness=effectiveness)

    # Rendering

    def explosive_reaction(self, distance: Distance) -> str:
        return render_explosive(self.resolve_explosive(distance))

    def projectile_reaction(self, distance: Distance) -> str:
        return render_projectile(self.resolve_projectile(distance), self.char_token)

    def melee_reaction(self) -> str:
        return render_melee(self.resolve_melee(), self.char_token)

    def compose(self, buffer: Optional[ScenarioBuffer] = None) -> ScenarioBuffer:
        """
        Append every reaction to the scenario buffer in the fixed order.

        Args:
            buffer: Host buffer to extend; a new one is created when omitted

        Returns:
            The buffer that was appended to
        """
        if buffer is None:
            buffer = ScenarioBuffer()

        if settings.DEBUG:
            logger.info(f"Attribute set: {self.attributes.as_dict()}")

        char = self.char_token
        lines = [f"# {char} should react to an explosion in this way:\n"]
        lines.extend(self.explosive_reaction(distance) for distance in DISTANCES)

        lines.append(
            f"# {char} should react to being shot at, or a projectile directed "
            "towards them, in this way:\n"
        )
        lines.extend(self.projectile_reaction(distance) for distance in DISTANCES)

        lines.append(self.melee_reaction())

        for line in lines:
            buffer.append(line)

        logger.debug(f"Composed {len(lines)} reaction lines")
        return buffer


def compose_reactions(
    attributes: Union[AttributeSet, Mapping[str, Any]],
    buffer: Optional[ScenarioBuffer] = None,
    rng: Optional[random.Random] = None,
) -> ScenarioBuffer:
    """Convenience function: validate attributes and compose all reactions."""
    return ReactionComposer(attributes, rng=rng).compose(buffer)
