"""
Answer validation for the eligibility walkthrough.
Decides which answer keys exist, which values they accept, and which fields
are in play for a given set of answers.
"""

import math
from typing import Any, Optional

from rw_billing.constants import LPAP_FPL_LIMIT, MEDICARE_FPL_LIMIT
from rw_billing.schemas import (
    Answers,
    DrugType,
    InsuranceType,
    ProgramPath,
    RwPrimaryStatus,
)


class InvalidField(LookupError):
    """Answer key the engine does not recognise, or one that cannot be answered now."""


class FieldNotInPlay(InvalidField):
    """Recognised field whose question is not asked for the current answers."""


class InvalidValue(ValueError):
    """Value outside the domain of its field."""


# Layer of each field. Writing a field clears every field on a higher layer.
FIELD_LAYERS = {
    "certified": 0,
    "has_insurance": 1,
    "insurance_type": 2,
    "fpl": 3,
    "path": 3,
    "drug_type": 4,
    "is_arv_only": 5,
    "rw_primary_status": 5,
    "non_formulary_primary_covered": 5,
    "mmcap_price": 6,
}

# Order in which questions are asked
ANSWERABLE_FIELDS = (
    "certified",
    "has_insurance",
    "insurance_type",
    "fpl",
    "drug_type",
    "is_arv_only",
    "rw_primary_status",
    "non_formulary_primary_covered",
    "mmcap_price",
)

DERIVED_FIELDS = {"path"}

BOOLEAN_FIELDS = {"certified", "has_insurance", "is_arv_only", "non_formulary_primary_covered"}
NUMERIC_FIELDS = {"fpl", "mmcap_price"}
ENUM_FIELDS = {
    "insurance_type": InsuranceType,
    "drug_type": DrugType,
    "rw_primary_status": RwPrimaryStatus,
}


def _build_key_index() -> dict[str, str]:
    index = {}
    for name, info in Answers.model_fields.items():
        index[name] = name
        if info.alias:
            index[info.alias] = name
    return index


_KEY_INDEX = _build_key_index()


def resolve_field(key: Any) -> str:
    """
    Map an answer key (snake_case or camelCase) to its Answers attribute name.

    Raises InvalidField for unknown keys and for derived fields.
    """
    name = _KEY_INDEX.get(key) if isinstance(key, str) else None
    if name is None:
        raise InvalidField(f"Unrecognized answer field: {key!r}")
    if name in DERIVED_FIELDS:
        raise InvalidField(f"'{key}' is derived from insurance type and FPL and cannot be answered")
    return name


def validate_value(field: str, value: Any) -> Any:
    """
    Check a value against its field's domain and return it in canonical form.

    Booleans must be real booleans, enums accept members or their display
    strings, numbers must be finite and non-negative.
    """
    if value is None:
        raise InvalidValue(f"'{field}' requires a value")

    if field in BOOLEAN_FIELDS:
        if not isinstance(value, bool):
            raise InvalidValue(f"'{field}' must be true or false, got {value!r}")
        return value

    if field in NUMERIC_FIELDS:
        # bool is an int subclass; True is not a price
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidValue(f"'{field}' must be a number, got {value!r}")
        try:
            number = float(value)
        except OverflowError:
            raise InvalidValue(f"'{field}' is too large to be a number") from None
        if not math.isfinite(number):
            raise InvalidValue(f"'{field}' must be a finite number, got {value!r}")
        if number < 0:
            raise InvalidValue(f"'{field}' must not be negative, got {value!r}")
        return number

    enum_cls = ENUM_FIELDS.get(field)
    if enum_cls is not None:
        try:
            return enum_cls(value)
        except ValueError:
            allowed = [member.value for member in enum_cls]
            raise InvalidValue(f"'{field}' must be one of {allowed}, got {value!r}") from None

    raise InvalidField(f"Unrecognized answer field: {field!r}")


def parse_numeric_input(text: Optional[str]) -> Optional[float]:
    """
    Parse a typed FPL % or MMCAP price.

    Returns None for blank, malformed or non-finite text; such input is not
    submitted at all. Range checks are left to validate_value.
    """
    if text is None:
        return None
    cleaned = text.strip().lstrip("$").rstrip("%").strip()
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def is_medicare_ineligible(answers: Answers) -> bool:
    return (
        answers.insurance_type == InsuranceType.MEDICARE
        and answers.fpl is not None
        and answers.fpl > MEDICARE_FPL_LIMIT
    )


def derive_path(insurance_type: Optional[InsuranceType], fpl: Optional[float]) -> Optional[ProgramPath]:
    """Program path implied by insurance type and FPL %, or None if not determined."""
    if insurance_type is None or fpl is None:
        return None
    if insurance_type == InsuranceType.MEDICARE:
        if fpl > MEDICARE_FPL_LIMIT:
            return None
        return ProgramPath.DOH_COPAY_CARD
    if fpl < LPAP_FPL_LIMIT:
        return ProgramPath.LPAP
    return ProgramPath.MEDCO


def fill_derived_path(answers: Answers) -> Answers:
    """
    Fill in the program path when the client left it out.

    A path the client did send is kept as-is, so validate_answers can still
    reject one that disagrees with insurance type and FPL.
    """
    if "path" in answers.model_fields_set:
        return answers
    return answers.model_copy(update={"path": derive_path(answers.insurance_type, answers.fpl)})


def field_in_play(answers: Answers, field: str) -> bool:
    """True if the question for ``field`` is asked given the upstream answers."""
    if field == "certified":
        return True
    if answers.certified is not True:
        return False
    if field == "has_insurance":
        return True
    if answers.has_insurance is not True:
        return False
    if field == "insurance_type":
        return True
    if answers.insurance_type is None:
        return False
    if field == "fpl":
        return True
    if answers.fpl is None or is_medicare_ineligible(answers):
        return False
    if field == "drug_type":
        return True

    drug_type = answers.drug_type
    if field == "is_arv_only":
        return drug_type == DrugType.ARV_BRAND and answers.insurance_type == InsuranceType.COMMERCIAL
    if field == "rw_primary_status":
        return drug_type == DrugType.RW_FORMULARY
    if field == "non_formulary_primary_covered":
        return drug_type == DrugType.NON_RW_FORMULARY
    if field == "mmcap_price":
        if drug_type == DrugType.RW_FORMULARY:
            return answers.rw_primary_status == RwPrimaryStatus.NONFORMULARY
        if drug_type == DrugType.NON_RW_FORMULARY:
            return answers.non_formulary_primary_covered is not None
        return False
    return False


def validate_answers(answers: Answers) -> list[str]:
    """
    Validate a complete Answers record received from a client.

    Checks that every answered field is in play for its upstream answers and
    that the derived program path matches insurance type and FPL.

    Returns a list of error strings. Empty list means the answers are consistent.
    """
    errors: list[str] = []

    for field in ANSWERABLE_FIELDS:
        if getattr(answers, field) is None:
            continue
        if not field_in_play(answers, field):
            errors.append(f"'{field}' is answered but its question is not reached by the upstream answers")

    expected_path = derive_path(answers.insurance_type, answers.fpl)
    if answers.path != expected_path:
        expected = expected_path.value if expected_path else None
        actual = answers.path.value if answers.path else None
        errors.append(f"'path' is {actual!r} but insurance type and FPL imply {expected!r}")

    return errors
