"""
Pydantic models for the eligibility walkthrough.
This is the source of truth for the JSON shape exchanged with the UI.

Field names are snake_case in Python and camelCase on the wire
(``hasInsurance``, ``isARVOnly``, ``mmcapPrice`` ...).
"""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InsuranceType(str, Enum):
    MEDICARE = "Medicare"
    COMMERCIAL = "Commercial"


class ProgramPath(str, Enum):
    DOH_COPAY_CARD = "DOH Copay Card"
    LPAP = "LPAP"
    MEDCO = "MEDCO"


class DrugType(str, Enum):
    ARV_BRAND = "ARV/Brand"
    RW_FORMULARY = "RW Formulary"
    NON_RW_FORMULARY = "Non-RW-Formulary"


class RwPrimaryStatus(str, Enum):
    COVERED = "covered"
    DENIED = "denied"
    NONFORMULARY = "nonformulary"


class Phase(str, Enum):
    CERTIFICATION = "certification"
    INSURANCE = "insurance"
    FPL = "fpl"
    DRUG_TYPE = "drug_type"
    DRUG_DETAILS = "drug_details"
    RESULT = "result"


class Step(str, Enum):
    """The single question currently awaiting an answer (finer than Phase)."""
    CERTIFIED = "certified"
    HAS_INSURANCE = "has_insurance"
    INSURANCE_TYPE = "insurance_type"
    FPL = "fpl"
    DRUG_TYPE = "drug_type"
    IS_ARV_ONLY = "is_arv_only"
    RW_PRIMARY_STATUS = "rw_primary_status"
    NON_FORMULARY_PRIMARY_COVERED = "non_formulary_primary_covered"
    MMCAP_PRICE = "mmcap_price"
    DONE = "done"


class StepCategory(str, Enum):
    PRIMARY = "primary"
    MFG_CARD = "mfg_card"
    DOH_COPAY = "doh_copay"
    MEDCO = "medco"
    LPAP = "lpap"
    MAGELLAN = "magellan"
    STOP = "stop"


class TrafficColor(str, Enum):
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    NEUTRAL = "neutral"


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Answers(_WireModel):
    """Everything the operator has answered so far. ``None`` means not yet answered."""
    certified: Optional[bool] = None
    has_insurance: Optional[bool] = None
    insurance_type: Optional[InsuranceType] = None
    fpl: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    path: Optional[ProgramPath] = None
    drug_type: Optional[DrugType] = None
    is_arv_only: Optional[bool] = Field(default=None, alias="isARVOnly")
    rw_primary_status: Optional[RwPrimaryStatus] = None
    non_formulary_primary_covered: Optional[bool] = None
    mmcap_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class BillingStep(_WireModel):
    label: str
    category: StepCategory
    badge: str


class BillingSequence(_WireModel):
    title: str = "Billing sequence"
    steps: list[BillingStep] = []
    note: Optional[str] = None
    has_medco_in_sequence: bool = False


class TrafficFlags(_WireModel):
    medicare_no_mfg: bool = False
    medco_shadow: bool = False


class TrafficState(_WireModel):
    state: TrafficColor
    reasons: list[str] = []
    flags: TrafficFlags
    callouts: list[str] = []


class Selection(_WireModel):
    label: str
    value: str


class QuestionOption(_WireModel):
    label: str
    value: Any


class Question(_WireModel):
    step: Step
    field: str
    prompt: str
    input_kind: Literal["choice", "number"]
    options: list[QuestionOption] = []
    placeholder: Optional[str] = None
    hint: Optional[str] = None


class AssessmentResult(_WireModel):
    message: str
    color: Literal["red", "blue", "green"]
    shadow_claim: bool = False
    note: Optional[str] = None


class SessionState(_WireModel):
    """Full render payload for one point in the walkthrough."""
    answers: Answers
    phase: Phase
    step: Step
    question: Optional[Question] = None
    traffic: TrafficState
    billing_sequence: BillingSequence
    selections: list[Selection]
    result: AssessmentResult


# ===== Request Schemas =====

class AnswerRequest(_WireModel):
    """Apply one answer on top of the answers the client already holds."""
    answers: Answers = Field(
        default_factory=Answers,
        description="Answers collected so far (omit to start a new walkthrough)",
    )
    key: str = Field(..., description="Answer field, e.g. 'fpl' or 'drugType'", examples=["fpl"])
    value: Any = Field(..., description="Answer value", examples=[150])
