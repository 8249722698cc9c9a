"""
Character attribute set consumed by the reaction engine.

Attributes are supplied by the host for a single resolution pass and are
validated eagerly here so that no formula ever sees a missing or non-finite
value.
"""

import logging
import numbers
from typing import Any, Dict, List, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

ATTRIBUTE_MIN = 0.0
ATTRIBUTE_MAX = 100.0

# physical: vitality, agility, resilience, strength
# mental: perception, stress_control
# combat: handling, cqc, melee
ATTRIBUTE_NAMES: Tuple[str, ...] = (
    "vitality",
    "agility",
    "resilience",
    "strength",
    "perception",
    "stress_control",
    "handling",
    "cqc",
    "melee",
)


class InvalidAttributeSetError(ValueError):
    """Raised when a host attribute record is missing fields or has bad values."""

    def __init__(self, missing: List[str], invalid: Dict[str, str]):
        self.missing = list(missing)
        self.invalid = dict(invalid)

        parts = []
        if self.missing:
            parts.append(f"missing: {', '.join(self.missing)}")
        if self.invalid:
            details = "; ".join(f"{name} ({why})" for name, why in self.invalid.items())
            parts.append(f"invalid: {details}")
        super().__init__(f"Invalid attribute set - {' | '.join(parts)}")


def _attribute_field() -> Any:
    return Field(ge=ATTRIBUTE_MIN, le=ATTRIBUTE_MAX, allow_inf_nan=False)


class AttributeSet(BaseModel):
    """The nine numeric traits of a character, conventionally 0-100."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    vitality: float = _attribute_field()
    agility: float = _attribute_field()
    resilience: float = _attribute_field()
    strength: float = _attribute_field()
    perception: float = _attribute_field()
    stress_control: float = _attribute_field()
    handling: float = _attribute_field()
    cqc: float = _attribute_field()
    melee: float = _attribute_field()

    @field_validator("*", mode="before")
    @classmethod
    def reject_non_numeric(cls, value: Any) -> Any:
        # bools and numeric strings would otherwise be coerced silently
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ValueError(f"expected a number, got {type(value).__name__}")
        return value

    @classmethod
    def from_mapping(
        cls, attributes: Union["AttributeSet", Mapping[str, Any]]
    ) -> "AttributeSet":
        """
        Build a validated attribute set from a host mapping.

        Args:
            attributes: Mapping of attribute name to numeric value. An existing
                AttributeSet is returned unchanged.

        Returns:
            A frozen AttributeSet

        Raises:
            InvalidAttributeSetError: Listing every missing or invalid field
        """
        if isinstance(attributes, AttributeSet):
            return attributes
        if not isinstance(attributes, Mapping):
            raise InvalidAttributeSetError(
                list(ATTRIBUTE_NAMES),
                {"attributes": f"expected a mapping, got {type(attributes).__name__}"},
            )

        try:
            return cls.model_validate(dict(attributes))
        except ValidationError as e:
            missing: List[str] = []
            invalid: Dict[str, str] = {}
            for error in e.errors():
                name = str(error["loc"][0]) if error.get("loc") else "attributes"
                if error["type"] == "missing":
                    missing.append(name)
                else:
                    invalid[name] = error["msg"]
            logger.warning(f"Rejected attribute set: missing={missing} invalid={invalid}")
            raise InvalidAttributeSetError(missing, invalid) from e

    def get(self, name: str) -> float:
        """Look up an attribute by name."""
        if name not in ATTRIBUTE_NAMES:
            raise KeyError(f"Unknown attribute: {name}")
        return getattr(self, name)

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in ATTRIBUTE_NAMES}
