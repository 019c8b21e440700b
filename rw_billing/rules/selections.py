"""
Human-readable summary of the answers that are in play.
"""

from typing import Optional

from rw_billing.constants import EMPTY_DISPLAY
from rw_billing.schemas import (
    Answers,
    DrugType,
    InsuranceType,
    RwPrimaryStatus,
    Selection,
)
from rw_billing.validation import is_medicare_ineligible

RW_PRIMARY_STATUS_LABELS = {
    RwPrimaryStatus.COVERED: "Covered",
    RwPrimaryStatus.DENIED: "Denied",
    RwPrimaryStatus.NONFORMULARY: "Non-Formulary (Primary) — COB override",
}


def format_yes_no(value: Optional[bool]) -> str:
    if value is True:
        return "Yes"
    if value is False:
        return "No"
    return EMPTY_DISPLAY


def format_number(value: float) -> str:
    """30.0 -> '30', 30.5 -> '30.5'"""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _percent(value: Optional[float]) -> str:
    return f"{format_number(value)}%" if value is not None else EMPTY_DISPLAY


def _dollars(value: Optional[float]) -> str:
    return f"${format_number(value)}" if value is not None else EMPTY_DISPLAY


def selections(answers: Answers) -> list[Selection]:
    """
    Ordered (label, value) pairs for the summary rail.

    Stops early at the same points the walkthrough does (not certified,
    no insurance, Medicare over the FPL limit) so irrelevant fields never show.
    """
    items = [Selection(label="Ryan White Certified (up to date)", value=format_yes_no(answers.certified))]
    if answers.certified is False:
        return items

    items.append(Selection(label="Has insurance", value=format_yes_no(answers.has_insurance)))
    if answers.has_insurance is False:
        return items

    insurance = answers.insurance_type.value if answers.insurance_type else EMPTY_DISPLAY
    items.append(Selection(label="Primary insurance type", value=insurance))

    if answers.insurance_type is not None:
        items.append(Selection(label="FPL %", value=_percent(answers.fpl)))

    if is_medicare_ineligible(answers):
        return items

    if answers.path is not None:
        items.append(Selection(label="Program path (derived)", value=answers.path.value))

    drug_type = answers.drug_type
    items.append(Selection(label="Drug type", value=drug_type.value if drug_type else EMPTY_DISPLAY))

    if drug_type == DrugType.ARV_BRAND and answers.insurance_type == InsuranceType.COMMERCIAL:
        items.append(Selection(label="ARV only", value=format_yes_no(answers.is_arv_only)))

    elif drug_type == DrugType.RW_FORMULARY:
        status = answers.rw_primary_status
        items.append(Selection(
            label="Primary status (RW formulary)",
            value=RW_PRIMARY_STATUS_LABELS[status] if status else EMPTY_DISPLAY,
        ))
        # MMCAP gate only applies when primary treats the drug as non-formulary
        if status == RwPrimaryStatus.NONFORMULARY:
            items.append(Selection(label="MMCAP price", value=_dollars(answers.mmcap_price)))

    elif drug_type == DrugType.NON_RW_FORMULARY:
        items.append(Selection(
            label="Covered by Primary (Non-Formulary)",
            value=format_yes_no(answers.non_formulary_primary_covered),
        ))
        items.append(Selection(label="MMCAP price", value=_dollars(answers.mmcap_price)))

    return items
