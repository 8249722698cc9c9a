"""
Host integration for the combat reaction engine.

A host character record carries an attribute mapping and a scenario string
(the text later handed to the language model). apply_modern_combat reads the
attributes for this call only, composes every reaction and writes the
extended scenario back onto the record.
"""

import logging
import random
from typing import Any, MutableMapping, Optional, Union

from .reaction_composer import ReactionComposer
from .scenario import ScenarioBuffer

logger = logging.getLogger(__name__)


def _read(character: Any, field: str) -> Any:
    if isinstance(character, MutableMapping):
        if field not in character:
            raise KeyError(f"Character record has no '{field}'")
        return character[field]
    if not hasattr(character, field):
        raise AttributeError(f"Character object has no '{field}'")
    return getattr(character, field)


def _write(character: Any, field: str, value: Any) -> None:
    if isinstance(character, MutableMapping):
        character[field] = value
    else:
        setattr(character, field, value)


def apply_modern_combat(
    character: Union[MutableMapping[str, Any], Any],
    rng: Optional[random.Random] = None,
) -> str:
    """
    Append combat reaction instructions to a character's scenario.

    Args:
        character: Mapping or object exposing 'attributes' and 'scenario'
        rng: Optional random source for reproducible rolls

    Returns:
        The text that was appended

    Raises:
        InvalidAttributeSetError: If the attribute record is incomplete or invalid
    """
    attributes = _read(character, "attributes")
    scenario = _read(character, "scenario") or ""

    composer = ReactionComposer(attributes, rng=rng)
    appended = composer.compose(ScenarioBuffer()).text

    _write(character, "scenario", scenario + appended)
    logger.debug(f"Appended {len(appended)} characters to scenario")
    return appended
