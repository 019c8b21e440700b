"""
Answer transitions for the eligibility walkthrough.

The phase shown to the operator is never stored on its own: it is derived
from the answers every time, so it cannot drift out of sync with them.
"""

import logging
from typing import Any

from rw_billing.schemas import Answers, Phase, Step
from rw_billing.validation import (
    ANSWERABLE_FIELDS,
    FIELD_LAYERS,
    FieldNotInPlay,
    derive_path,
    field_in_play,
    resolve_field,
    validate_value,
)

logger = logging.getLogger(__name__)

_STEP_PHASES = {
    Step.CERTIFIED: Phase.CERTIFICATION,
    Step.HAS_INSURANCE: Phase.INSURANCE,
    Step.INSURANCE_TYPE: Phase.INSURANCE,
    Step.FPL: Phase.FPL,
    Step.DRUG_TYPE: Phase.DRUG_TYPE,
    Step.IS_ARV_ONLY: Phase.DRUG_DETAILS,
    Step.RW_PRIMARY_STATUS: Phase.DRUG_DETAILS,
    Step.NON_FORMULARY_PRIMARY_COVERED: Phase.DRUG_DETAILS,
    Step.MMCAP_PRICE: Phase.DRUG_DETAILS,
    Step.DONE: Phase.RESULT,
}


def current_step(answers: Answers) -> Step:
    """First question that is in play and still unanswered, or DONE."""
    for field in ANSWERABLE_FIELDS:
        if getattr(answers, field) is None and field_in_play(answers, field):
            return Step(field)
    return Step.DONE


def derive_phase(answers: Answers) -> Phase:
    return _STEP_PHASES[current_step(answers)]


def apply_answer(answers: Answers, key: str, value: Any) -> tuple[Answers, Phase]:
    """
    Write one answer and return the updated answers with the next phase.

    The input record is not modified. Every field on a later layer than
    ``key`` is cleared, and the program path is re-derived when FPL changes.

    Raises:
        InvalidField: unknown or derived key.
        FieldNotInPlay: the key's question is not asked for these answers.
        InvalidValue: value outside the field's domain.
    """
    field = resolve_field(key)
    canonical = validate_value(field, value)

    if not field_in_play(answers, field):
        raise FieldNotInPlay(f"'{key}' is not asked at this point in the walkthrough")

    layer = FIELD_LAYERS[field]
    updates: dict[str, Any] = {name: None for name, lvl in FIELD_LAYERS.items() if lvl > layer}
    updates[field] = canonical
    if field == "fpl":
        updates["path"] = derive_path(answers.insurance_type, canonical)

    updated = answers.model_copy(update=updates)
    phase = derive_phase(updated)

    logger.debug("Applied %s=%r -> phase=%s", field, canonical, phase.value)
    return updated, phase
