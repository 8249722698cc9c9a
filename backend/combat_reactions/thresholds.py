"""
Threshold calculators backed by YAML weight tables.

Each formula is a fixed linear combination of attributes whose weights sum to
1.0, so a threshold stays on the same 0-100 scale as the attributes. The
tables encode game balance and live in threshold_tables/<stimulus>.yaml:

    <effect>:
      <distance band>:
        - {attribute: <name>, weight: <float>}
"""

import logging
import math
import os
from typing import Dict, List, NamedTuple, Optional, Tuple

import yaml

from . import settings
from .attributes import ATTRIBUTE_NAMES, AttributeSet
from .outcomes import DISTANCES, Distance, to_distance

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 1e-9

# Band used by formulas that have no distance variants
ANY_BAND = "any"

_RANGED_BANDS = tuple(d.value for d in DISTANCES)

# Formulas the reaction composer depends on: (stimulus, effect) -> bands
REQUIRED_FORMULAS: Dict[Tuple[str, str], Tuple[str, ...]] = {
    ("explosive", "blast"): _RANGED_BANDS,
    ("projectile", "hit_evasion"): _RANGED_BANDS,
    ("projectile", "wound_severity"): _RANGED_BANDS,
    ("projectile", "mental_stability"): _RANGED_BANDS,
    ("projectile", "retaliation"): _RANGED_BANDS,
    ("melee", "effectiveness"): (ANY_BAND,),
}


class ThresholdTableError(ValueError):
    """Raised when a weight table is missing, malformed or unbalanced."""


class Term(NamedTuple):
    attribute: str
    weight: float


class ThresholdTable:
    """Weight formulas loaded from the YAML tables directory."""

    def __init__(self, tables_dir: Optional[str] = None):
        self.tables_dir = tables_dir or settings.TABLES_DIR
        self.formulas: Dict[Tuple[str, str, str], Tuple[Term, ...]] = {}
        self._load_threshold_tables()
        self._check_required_formulas()

    def _load_threshold_tables(self) -> None:
        """Load every *.yaml / *.yml file; the file name is the stimulus."""
        if not os.path.isdir(self.tables_dir):
            raise ThresholdTableError(
                f"Threshold tables directory not found: {self.tables_dir}"
            )

        for filename in sorted(os.listdir(self.tables_dir)):
            if not (filename.endswith(".yaml") or filename.endswith(".yml")):
                continue

            stimulus = filename.rsplit(".", 1)[0]
            filepath = os.path.join(self.tables_dir, filename)

            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    table_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ThresholdTableError(
                    f"Failed to parse threshold table {filename}: {e}"
                ) from e

            self._register_table(stimulus, table_data or {}, filename)
            logger.info(f"Loaded threshold table: {stimulus}")

    def _register_table(self, stimulus: str, table_data, filename: str) -> None:
        if not isinstance(table_data, dict):
            raise ThresholdTableError(f"{filename}: top level must be a mapping")

        for effect, bands in table_data.items():
            if not isinstance(bands, dict):
                raise ThresholdTableError(
                    f"{filename}: effect '{effect}' must map distance bands to terms"
                )
            for band, raw_terms in bands.items():
                key = (stimulus, str(effect), str(band))
                self.formulas[key] = self._parse_terms(raw_terms, key)

    def _parse_terms(self, raw_terms, key: Tuple[str, str, str]) -> Tuple[Term, ...]:
        label = ".".join(key)
        if not isinstance(raw_terms, list) or not raw_terms:
            raise ThresholdTableError(f"{label}: expected a non-empty list of terms")

        terms: List[Term] = []
        for raw in raw_terms:
            if not isinstance(raw, dict) or "attribute" not in raw or "weight" not in raw:
                raise ThresholdTableError(
                    f"{label}: each term needs 'attribute' and 'weight', got {raw!r}"
                )
            attribute = raw["attribute"]
            if attribute not in ATTRIBUTE_NAMES:
                raise ThresholdTableError(f"{label}: unknown attribute '{attribute}'")
            try:
                weight = float(raw["weight"])
            except (TypeError, ValueError) as e:
                raise ThresholdTableError(
                    f"{label}: weight for '{attribute}' is not a number"
                ) from e
            if not math.isfinite(weight):
                raise ThresholdTableError(
                    f"{label}: weight for '{attribute}' must be finite, got {weight}"
                )
            terms.append(Term(attribute, weight))

        total = math.fsum(term.weight for term in terms)
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise ThresholdTableError(f"{label}: weights sum to {total}, expected 1.0")

        return tuple(terms)

    def _check_required_formulas(self) -> None:
        missing = [
            f"{stimulus}.{effect}.{band}"
            for (stimulus, effect), bands in REQUIRED_FORMULAS.items()
            for band in bands
            if (stimulus, effect, band) not in self.formulas
        ]
        if missing:
            raise ThresholdTableError(
                f"Threshold tables in {self.tables_dir} are missing: {', '.join(missing)}"
            )

    def terms(self, stimulus: str, effect: str, band: str) -> Tuple[Term, ...]:
        try:
            return self.formulas[(stimulus, effect, band)]
        except KeyError:
            raise ValueError(f"No threshold formula for {stimulus}.{effect}.{band}")

    def compute(
        self,
        attributes: AttributeSet,
        stimulus: str,
        effect: str,
        distance: Optional[Distance] = None,
    ) -> float:
        """Weighted sum of attributes for one formula."""
        band = ANY_BAND if distance is None else to_distance(distance).value
        return math.fsum(
            attributes.get(term.attribute) * term.weight
            for term in self.terms(stimulus, effect, band)
        )


# Global table instance
_table_instance: Optional[ThresholdTable] = None


def get_threshold_table() -> ThresholdTable:
    """Get the global threshold table, loading it on first use."""
    global _table_instance
    if _table_instance is None:
        _table_instance = ThresholdTable()
    return _table_instance


def reset_threshold_table() -> None:
    """Drop the cached table so the next lookup reloads from settings.TABLES_DIR."""
    global _table_instance
    _table_instance = None


def _table(table: Optional[ThresholdTable]) -> ThresholdTable:
    return table if table is not None else get_threshold_table()


def blast_threshold(
    attributes: AttributeSet, distance: Distance, table: Optional[ThresholdTable] = None
) -> float:
    """Resistance to an explosion's blast wave."""
    return _table(table).compute(attributes, "explosive", "blast", distance)


def hit_evasion_threshold(
    attributes: AttributeSet, distance: Distance, table: Optional[ThresholdTable] = None
) -> float:
    """Chance to avoid being hit by an incoming projectile."""
    return _table(table).compute(attributes, "projectile", "hit_evasion", distance)


def wound_severity_threshold(
    attributes: AttributeSet, distance: Distance, table: Optional[ThresholdTable] = None
) -> float:
    return _table(table).compute(attributes, "projectile", "wound_severity", distance)


def mental_stability_threshold(
    attributes: AttributeSet, distance: Distance, table: Optional[ThresholdTable] = None
) -> float:
    return _table(table).compute(attributes, "projectile", "mental_stability", distance)


def retaliation_threshold(
    attributes: AttributeSet, distance: Distance, table: Optional[ThresholdTable] = None
) -> float:
    """Ability to return fire effectively."""
    return _table(table).compute(attributes, "projectile", "retaliation", distance)


def melee_threshold(
    attributes: AttributeSet, table: Optional[ThresholdTable] = None
) -> float:
    """Melee effectiveness; both weights read strength."""
    return _table(table).compute(attributes, "melee", "effectiveness")
