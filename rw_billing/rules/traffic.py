"""
Traffic-light status for the current answers.

Hard stops are checked in a fixed priority order and the first one wins.
Without a hard stop, every applicable advisory reason is collected.
"""

from rw_billing.constants import (
    MEDICARE_RULE_CALLOUT,
    MMCAP_SUPERVISOR_THRESHOLD,
    PI2MEDCO_CALLOUT,
)
from rw_billing.rules.billing_sequence import billing_sequence
from rw_billing.schemas import (
    Answers,
    DrugType,
    InsuranceType,
    ProgramPath,
    RwPrimaryStatus,
    TrafficColor,
    TrafficFlags,
    TrafficState,
)
from rw_billing.validation import is_medicare_ineligible


def _price_at_or_above_threshold(answers: Answers) -> bool:
    return answers.mmcap_price is not None and answers.mmcap_price >= MMCAP_SUPERVISOR_THRESHOLD


def _price_below_threshold(answers: Answers) -> bool:
    return answers.mmcap_price is not None and answers.mmcap_price < MMCAP_SUPERVISOR_THRESHOLD


def _hard_stop_reason(answers: Answers) -> str | None:
    if answers.certified is False:
        return "Not Ryan White certified"
    if is_medicare_ineligible(answers):
        return "Medicare + FPL > 400% (ineligible)"
    if answers.drug_type == DrugType.NON_RW_FORMULARY and _price_at_or_above_threshold(answers):
        return "Non-Formulary with MMCAP ≥ $50 (supervisor approval)"
    if (
        answers.drug_type == DrugType.RW_FORMULARY
        and answers.rw_primary_status == RwPrimaryStatus.NONFORMULARY
        and _price_at_or_above_threshold(answers)
    ):
        return "RW Formulary + Primary non-formulary with MMCAP ≥ $50 (supervisor approval)"
    return None


def _advisory_reasons(answers: Answers) -> list[str]:
    reasons = []
    if answers.path == ProgramPath.MEDCO:
        reasons.append("Shadow claim reporting required (PI2MEDCO)")
    if answers.drug_type == DrugType.RW_FORMULARY:
        if answers.rw_primary_status == RwPrimaryStatus.DENIED:
            reasons.append("Primary denied: flip to LPAP full cost")
        if answers.rw_primary_status == RwPrimaryStatus.NONFORMULARY:
            reasons.append("Primary non-formulary: use COB override with LPAP")
    if answers.drug_type == DrugType.NON_RW_FORMULARY and _price_below_threshold(answers):
        reasons.append("Non-Formulary: use LPAP")
    return reasons


def _has_progress(answers: Answers) -> bool:
    return any(
        value is not None
        for value in (
            answers.certified,
            answers.has_insurance,
            answers.insurance_type,
            answers.fpl,
            answers.drug_type,
        )
    )


def traffic_state(answers: Answers) -> TrafficState:
    flags = TrafficFlags(
        medicare_no_mfg=answers.insurance_type == InsuranceType.MEDICARE,
        medco_shadow=answers.path == ProgramPath.MEDCO,
    )

    callouts = []
    if flags.medicare_no_mfg:
        callouts.append(MEDICARE_RULE_CALLOUT)
    if billing_sequence(answers).has_medco_in_sequence:
        callouts.append(PI2MEDCO_CALLOUT)

    stop_reason = _hard_stop_reason(answers)
    if stop_reason is not None:
        return TrafficState(state=TrafficColor.RED, reasons=[stop_reason], flags=flags, callouts=callouts)

    reasons = _advisory_reasons(answers)
    if reasons:
        return TrafficState(state=TrafficColor.YELLOW, reasons=reasons, flags=flags, callouts=callouts)

    state = TrafficColor.GREEN if _has_progress(answers) else TrafficColor.NEUTRAL
    return TrafficState(state=state, reasons=[], flags=flags, callouts=callouts)
