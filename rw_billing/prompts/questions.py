"""
Question catalogue: what the operator is asked at each step.

The UI renders whatever build_question returns and sends the chosen option
value (or the typed number) back under ``field``.
"""

from typing import Optional

from rw_billing.schemas import (
    Answers,
    DrugType,
    InsuranceType,
    Question,
    QuestionOption,
    RwPrimaryStatus,
    Step,
)
from rw_billing.services.transitions import current_step


def _wire_name(step: Step) -> str:
    info = Answers.model_fields[step.value]
    return info.alias or step.value


def _yes_no(step: Step, prompt: str, yes: str = "YES", no: str = "NO") -> Question:
    return Question(
        step=step,
        field=_wire_name(step),
        prompt=prompt,
        input_kind="choice",
        options=[QuestionOption(label=yes, value=True), QuestionOption(label=no, value=False)],
    )


def _number(step: Step, prompt: str, placeholder: str) -> Question:
    return Question(
        step=step,
        field=_wire_name(step),
        prompt=prompt,
        input_kind="number",
        placeholder=placeholder,
    )


def _drug_type_question(answers: Answers) -> Question:
    is_medicare = answers.insurance_type == InsuranceType.MEDICARE
    arv_label = "ARV/Brand (DOH Copay Only)" if is_medicare else "ARV/Brand (Mfg Card Eligible)"
    return Question(
        step=Step.DRUG_TYPE,
        field=_wire_name(Step.DRUG_TYPE),
        prompt="What is the drug type?",
        input_kind="choice",
        options=[
            QuestionOption(label=arv_label, value=DrugType.ARV_BRAND.value),
            QuestionOption(label="RW FORMULARY DRUG", value=DrugType.RW_FORMULARY.value),
            QuestionOption(label="NON-RW-FORMULARY DRUG", value=DrugType.NON_RW_FORMULARY.value),
        ],
        hint="Note: Mfg Card not used for Medicare" if is_medicare else None,
    )


def build_question(answers: Answers) -> Optional[Question]:
    """Question for the next unanswered step, or None once the walkthrough is done."""
    step = current_step(answers)

    if step == Step.CERTIFIED:
        return _yes_no(step, "Is the patient Ryan White certified and up to date?")
    if step == Step.HAS_INSURANCE:
        return _yes_no(step, "Does the patient have insurance?")
    if step == Step.INSURANCE_TYPE:
        return Question(
            step=step,
            field=_wire_name(step),
            prompt="Primary Insurance Type?",
            input_kind="choice",
            options=[
                QuestionOption(label="MEDICARE", value=InsuranceType.MEDICARE.value),
                QuestionOption(label="COMMERCIAL", value=InsuranceType.COMMERCIAL.value),
            ],
        )
    if step == Step.FPL:
        return _number(step, "What is the patient's FPL %?", "Enter FPL %")
    if step == Step.DRUG_TYPE:
        return _drug_type_question(answers)
    if step == Step.IS_ARV_ONLY:
        return _yes_no(step, "Is ONLY an ARV prescribed?", yes="YES (ARV ONLY)", no="NO (OTHER DRUGS TOO)")
    if step == Step.RW_PRIMARY_STATUS:
        return Question(
            step=step,
            field=_wire_name(step),
            prompt="Primary Insurance status for this RW formulary drug?",
            input_kind="choice",
            options=[
                QuestionOption(label="COVERED", value=RwPrimaryStatus.COVERED.value),
                QuestionOption(label="NON-FORMULARY (PRIMARY)", value=RwPrimaryStatus.NONFORMULARY.value),
                QuestionOption(label="DENIED", value=RwPrimaryStatus.DENIED.value),
            ],
        )
    if step == Step.NON_FORMULARY_PRIMARY_COVERED:
        return _yes_no(
            step,
            "Is this Non-RW-Formulary drug covered by Primary Insurance?",
            yes="YES (COVERED)",
            no="NO / NOT COVERED",
        )
    if step == Step.MMCAP_PRICE:
        return _number(step, "What is the MMCAP price?", "Enter MMCAP price ($)")

    return None
