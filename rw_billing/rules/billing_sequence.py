"""
Billing sequence builder: the ordered list of payers/programs to bill.

Each step carries a category set here, so consumers never have to inspect
labels to decide how a step is rendered or whether MEDCO is involved.
"""

from rw_billing.constants import (
    MEDICARE_NO_MFG_NOTE,
    MMCAP_SUPERVISOR_THRESHOLD,
    SHADOW_CLAIM_NOTE,
)
from rw_billing.schemas import (
    Answers,
    BillingSequence,
    BillingStep,
    DrugType,
    InsuranceType,
    ProgramPath,
    RwPrimaryStatus,
    StepCategory,
)
from rw_billing.validation import is_medicare_ineligible

BADGES = {
    StepCategory.PRIMARY: "PRIMARY",
    StepCategory.MFG_CARD: "MFG CARD",
    StepCategory.DOH_COPAY: "DOH COPAY",
    StepCategory.MEDCO: "MEDCO",
    StepCategory.LPAP: "LPAP",
    StepCategory.MAGELLAN: "MAGELLAN",
    StepCategory.STOP: "STOP",
}

_PATH_CATEGORIES = {
    ProgramPath.DOH_COPAY_CARD: StepCategory.DOH_COPAY,
    ProgramPath.LPAP: StepCategory.LPAP,
    ProgramPath.MEDCO: StepCategory.MEDCO,
}


def _step(label: str, category: StepCategory) -> BillingStep:
    return BillingStep(label=label, category=category, badge=BADGES[category])


def _primary() -> BillingStep:
    return _step("Primary Insurance", StepCategory.PRIMARY)


def _path_step(path: ProgramPath) -> BillingStep:
    return _step(path.value, _PATH_CATEGORIES[path])


def _stop(label: str) -> BillingStep:
    return _step(f"STOP: {label}", StepCategory.STOP)


def _sequence(steps: list[BillingStep], note: str | None = None) -> BillingSequence:
    has_medco = any(s.category == StepCategory.MEDCO for s in steps)
    return BillingSequence(steps=steps, note=note, has_medco_in_sequence=has_medco)


def _shadow_note(path: ProgramPath) -> str | None:
    return SHADOW_CLAIM_NOTE if path == ProgramPath.MEDCO else None


def billing_sequence(answers: Answers) -> BillingSequence:
    """
    Build the billing sequence for the current answers.

    Returns an empty sequence whenever an answer the current branch depends
    on is still missing; a partial answer set never produces a guess.
    """
    if answers.certified is None:
        return _sequence([])
    if answers.certified is False:
        return _sequence([_stop("Refer to Case Manager for Part A/B enrollment.")])

    if answers.has_insurance is None:
        return _sequence([])
    if answers.has_insurance is False:
        return _sequence([_step("DIRECT DISPENSE: Bill through MAGELLAN", StepCategory.MAGELLAN)])

    if answers.insurance_type is None or answers.fpl is None:
        return _sequence([])
    if is_medicare_ineligible(answers):
        return _sequence([_stop("Ineligible for Pharmacy")])

    # Every remaining branch bills the derived program path
    path = answers.path
    if answers.drug_type is None or path is None:
        return _sequence([])

    if answers.drug_type == DrugType.ARV_BRAND:
        return _arv_brand_sequence(answers, path)
    if answers.drug_type == DrugType.RW_FORMULARY:
        return _rw_formulary_sequence(answers, path)
    return _non_rw_formulary_sequence(answers)


def _arv_brand_sequence(answers: Answers, path: ProgramPath) -> BillingSequence:
    if answers.insurance_type == InsuranceType.MEDICARE:
        return _sequence(
            [_primary(), _step("DOH Copay Card", StepCategory.DOH_COPAY)],
            note=MEDICARE_NO_MFG_NOTE,
        )

    if answers.is_arv_only is None:
        return _sequence([])

    mfg_card = _step("Manufacturer Copay Card", StepCategory.MFG_CARD)
    if answers.is_arv_only:
        return _sequence([_primary(), mfg_card], note="Only ARV prescribed: no MEDCO step.")

    return _sequence([_primary(), mfg_card, _path_step(path)], note=_shadow_note(path))


def _rw_formulary_sequence(answers: Answers, path: ProgramPath) -> BillingSequence:
    status = answers.rw_primary_status
    if status is None:
        return _sequence([])

    if status == RwPrimaryStatus.DENIED:
        return _sequence([_step("LPAP (process full cost)", StepCategory.LPAP)])

    if status == RwPrimaryStatus.NONFORMULARY:
        if answers.mmcap_price is None:
            return _sequence([])
        if answers.mmcap_price >= MMCAP_SUPERVISOR_THRESHOLD:
            return _sequence([_stop("Seek Supervisor Approval")])
        return _sequence([_primary(), _step("LPAP (COB override)", StepCategory.LPAP)])

    # Covered by primary. No MMCAP check is made on this branch.
    return _sequence([_primary(), _path_step(path)], note=_shadow_note(path))


def _non_rw_formulary_sequence(answers: Answers) -> BillingSequence:
    if answers.non_formulary_primary_covered is None or answers.mmcap_price is None:
        return _sequence([])

    if answers.mmcap_price >= MMCAP_SUPERVISOR_THRESHOLD:
        return _sequence([_stop("Seek Supervisor Approval")])

    if answers.non_formulary_primary_covered:
        return _sequence([_primary(), _step("LPAP", StepCategory.LPAP)])
    return _sequence([_primary(), _step("LPAP (COB override)", StepCategory.LPAP)])
