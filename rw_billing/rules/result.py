"""
One-line outcome message for the Result screen.
"""

from rw_billing.constants import (
    MEDICARE_NO_MFG_NOTE,
    MMCAP_SUPERVISOR_THRESHOLD,
    SHADOW_CLAIM_NOTE,
)
from rw_billing.schemas import (
    Answers,
    AssessmentResult,
    DrugType,
    InsuranceType,
    ProgramPath,
    RwPrimaryStatus,
)
from rw_billing.validation import is_medicare_ineligible


def _continue() -> AssessmentResult:
    return AssessmentResult(message="Continue with assessment...", color="blue")


def _supervisor_stop() -> AssessmentResult:
    return AssessmentResult(message="STOP: Seek Supervisor Approval.", color="red")


def _shadow_claim(path: ProgramPath | None) -> dict:
    is_medco = path == ProgramPath.MEDCO
    return {"shadow_claim": is_medco, "note": SHADOW_CLAIM_NOTE if is_medco else None}


def calculate_result(answers: Answers) -> AssessmentResult:
    """
    Summarise the outcome as a message, a display colour and the shadow-claim flag.

    Colours: red for stops, blue for informational outcomes, green for a
    normal billing path.
    """
    if answers.certified is False:
        return AssessmentResult(message="STOP: Refer to Case Manager for Part A/B enrollment.", color="red")

    if answers.has_insurance is False:
        return AssessmentResult(message="DIRECT DISPENSE: Bill through MAGELLAN.", color="blue")

    if is_medicare_ineligible(answers):
        return AssessmentResult(message="Ineligible for Pharmacy.", color="red")

    path = answers.path

    if answers.drug_type == DrugType.ARV_BRAND:
        if answers.insurance_type == InsuranceType.MEDICARE:
            return AssessmentResult(
                message="Primary Insurance → DOH Copay Card",
                color="blue",
                note=MEDICARE_NO_MFG_NOTE,
            )
        if answers.is_arv_only is True:
            return AssessmentResult(
                message="Primary Insurance → Manufacturer Copay Card",
                color="green",
                note="Only ARV prescribed - No MEDCO needed.",
            )
        if answers.is_arv_only is False and path is not None:
            return AssessmentResult(
                message=f"Primary Insurance → Manufacturer Copay Card → {path.value} (for residual)",
                color="green",
                **_shadow_claim(path),
            )
        return _continue()

    if answers.drug_type == DrugType.RW_FORMULARY:
        status = answers.rw_primary_status
        if status == RwPrimaryStatus.DENIED:
            return AssessmentResult(message="Process full cost through LPAP.", color="green")
        if status == RwPrimaryStatus.NONFORMULARY:
            if answers.mmcap_price is None:
                return _continue()
            if answers.mmcap_price >= MMCAP_SUPERVISOR_THRESHOLD:
                return _supervisor_stop()
            return AssessmentResult(message="Primary Insurance → LPAP (COB override)", color="green")
        if status == RwPrimaryStatus.COVERED and path is not None:
            return AssessmentResult(
                message=f"Primary Insurance → {path.value}",
                color="blue" if path == ProgramPath.MEDCO else "green",
                **_shadow_claim(path),
            )
        return _continue()

    if answers.drug_type == DrugType.NON_RW_FORMULARY:
        if answers.non_formulary_primary_covered is None or answers.mmcap_price is None:
            return _continue()
        if answers.mmcap_price >= MMCAP_SUPERVISOR_THRESHOLD:
            return _supervisor_stop()
        if answers.non_formulary_primary_covered:
            return AssessmentResult(message="Primary Insurance → LPAP", color="green")
        return AssessmentResult(message="Primary Insurance → LPAP (COB override)", color="green")

    return _continue()
