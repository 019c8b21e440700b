"""
Tests for answer transitions: phase derivation, downstream resets and
rejected answers.
"""

import pytest

from rw_billing.schemas import Answers, DrugType, Phase, ProgramPath, RwPrimaryStatus, Step
from rw_billing.services.session import EligibilitySession
from rw_billing.services.transitions import apply_answer, current_step, derive_phase
from rw_billing.validation import FieldNotInPlay, InvalidField, InvalidValue


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _walk(*pairs) -> tuple[Answers, Phase]:
    """Apply (key, value) pairs in order from an empty record."""
    answers, phase = Answers(), Phase.CERTIFICATION
    for key, value in pairs:
        answers, phase = apply_answer(answers, key, value)
    return answers, phase


COMMERCIAL_MEDCO = (
    ("certified", True),
    ("hasInsurance", True),
    ("insuranceType", "Commercial"),
    ("fpl", 150),
)

COMMERCIAL_LPAP = COMMERCIAL_MEDCO[:3] + (("fpl", 30),)

MEDICARE_DOH = (
    ("certified", True),
    ("hasInsurance", True),
    ("insuranceType", "Medicare"),
    ("fpl", 250),
)


# ---------------------------------------------------------------------------
# Phase transitions
# ---------------------------------------------------------------------------

class TestPhaseTransitions:
    def test_empty_answers_start_at_certification(self):
        assert derive_phase(Answers()) == Phase.CERTIFICATION
        assert current_step(Answers()) == Step.CERTIFIED

    def test_not_certified_goes_straight_to_result(self):
        _, phase = _walk(("certified", False))
        assert phase == Phase.RESULT

    def test_certified_asks_about_insurance(self):
        answers, phase = _walk(("certified", True))
        assert phase == Phase.INSURANCE
        assert current_step(answers) == Step.HAS_INSURANCE

    def test_no_insurance_goes_to_result(self):
        _, phase = _walk(("certified", True), ("hasInsurance", False))
        assert phase == Phase.RESULT

    def test_has_insurance_stays_in_insurance_for_type(self):
        answers, phase = _walk(("certified", True), ("hasInsurance", True))
        assert phase == Phase.INSURANCE
        assert current_step(answers) == Step.INSURANCE_TYPE

    def test_insurance_type_moves_to_fpl(self):
        _, phase = _walk(*COMMERCIAL_MEDCO[:3])
        assert phase == Phase.FPL

    def test_commercial_low_fpl_derives_lpap(self):
        answers, phase = _walk(*COMMERCIAL_LPAP)
        assert answers.path == ProgramPath.LPAP
        assert phase == Phase.DRUG_TYPE

    def test_commercial_fpl_at_fifty_derives_medco(self):
        answers, phase = _walk(*COMMERCIAL_MEDCO[:3], ("fpl", 50))
        assert answers.path == ProgramPath.MEDCO
        assert phase == Phase.DRUG_TYPE

    def test_medicare_fpl_at_limit_derives_doh_copay(self):
        answers, phase = _walk(*MEDICARE_DOH[:3], ("fpl", 400))
        assert answers.path == ProgramPath.DOH_COPAY_CARD
        assert phase == Phase.DRUG_TYPE

    def test_medicare_over_limit_is_result(self):
        answers, phase = _walk(*MEDICARE_DOH[:3], ("fpl", 450))
        assert phase == Phase.RESULT
        assert answers.path is None

    def test_arv_brand_medicare_skips_drug_details(self):
        _, phase = _walk(*MEDICARE_DOH, ("drugType", "ARV/Brand"))
        assert phase == Phase.RESULT

    def test_arv_brand_commercial_asks_arv_only(self):
        answers, phase = _walk(*COMMERCIAL_MEDCO, ("drugType", "ARV/Brand"))
        assert phase == Phase.DRUG_DETAILS
        assert current_step(answers) == Step.IS_ARV_ONLY

    @pytest.mark.parametrize("arv_only", [True, False])
    def test_arv_only_answer_is_result(self, arv_only):
        _, phase = _walk(*COMMERCIAL_MEDCO, ("drugType", "ARV/Brand"), ("isARVOnly", arv_only))
        assert phase == Phase.RESULT

    def test_rw_formulary_asks_primary_status(self):
        answers, phase = _walk(*COMMERCIAL_MEDCO, ("drugType", "RW Formulary"))
        assert phase == Phase.DRUG_DETAILS
        assert current_step(answers) == Step.RW_PRIMARY_STATUS

    @pytest.mark.parametrize("status", ["covered", "denied"])
    def test_rw_covered_or_denied_is_result(self, status):
        _, phase = _walk(*COMMERCIAL_MEDCO, ("drugType", "RW Formulary"), ("rwPrimaryStatus", status))
        assert phase == Phase.RESULT

    def test_rw_nonformulary_asks_mmcap_price(self):
        answers, phase = _walk(*COMMERCIAL_MEDCO, ("drugType", "RW Formulary"), ("rwPrimaryStatus", "nonformulary"))
        assert phase == Phase.DRUG_DETAILS
        assert current_step(answers) == Step.MMCAP_PRICE

    def test_non_rw_formulary_asks_coverage_then_price(self):
        answers, phase = _walk(*COMMERCIAL_LPAP, ("drugType", "Non-RW-Formulary"))
        assert phase == Phase.DRUG_DETAILS
        assert current_step(answers) == Step.NON_FORMULARY_PRIMARY_COVERED

        answers, phase = apply_answer(answers, "nonFormularyPrimaryCovered", False)
        assert phase == Phase.DRUG_DETAILS
        assert current_step(answers) == Step.MMCAP_PRICE

        _, phase = apply_answer(answers, "mmcapPrice", 20)
        assert phase == Phase.RESULT


# ---------------------------------------------------------------------------
# Downstream resets
# ---------------------------------------------------------------------------

class TestDownstreamResets:
    def test_changing_drug_type_clears_details(self):
        answers, _ = _walk(
            *COMMERCIAL_MEDCO,
            ("drugType", "RW Formulary"),
            ("rwPrimaryStatus", "nonformulary"),
            ("mmcapPrice", 75),
        )
        answers, phase = apply_answer(answers, "drugType", "Non-RW-Formulary")

        assert answers.drug_type == DrugType.NON_RW_FORMULARY
        assert answers.rw_primary_status is None
        assert answers.mmcap_price is None
        assert answers.is_arv_only is None
        assert answers.non_formulary_primary_covered is None
        assert phase == Phase.DRUG_DETAILS

    def test_reselecting_same_drug_type_still_clears_details(self):
        answers, _ = _walk(*COMMERCIAL_MEDCO, ("drugType", "ARV/Brand"), ("isARVOnly", True))
        answers, phase = apply_answer(answers, "drugType", "ARV/Brand")
        assert answers.is_arv_only is None
        assert phase == Phase.DRUG_DETAILS

    def test_rw_primary_status_clears_mmcap_price(self):
        answers, _ = _walk(
            *COMMERCIAL_MEDCO,
            ("drugType", "RW Formulary"),
            ("rwPrimaryStatus", "nonformulary"),
            ("mmcapPrice", 20),
        )
        answers, _ = apply_answer(answers, "rwPrimaryStatus", "nonformulary")
        assert answers.mmcap_price is None

    def test_changing_fpl_rederives_path_and_clears_drug(self):
        answers, _ = _walk(*COMMERCIAL_MEDCO, ("drugType", "RW Formulary"))
        answers, phase = apply_answer(answers, "fpl", 20)
        assert answers.path == ProgramPath.LPAP
        assert answers.drug_type is None
        assert phase == Phase.DRUG_TYPE

    def test_changing_insurance_type_clears_fpl_and_path(self):
        answers, _ = _walk(*COMMERCIAL_MEDCO)
        answers, phase = apply_answer(answers, "insuranceType", "Medicare")
        assert answers.fpl is None
        assert answers.path is None
        assert phase == Phase.FPL

    def test_uncertifying_clears_everything_downstream(self):
        answers, _ = _walk(*COMMERCIAL_MEDCO, ("drugType", "ARV/Brand"))
        answers, phase = apply_answer(answers, "certified", False)
        assert answers == Answers(certified=False)
        assert phase == Phase.RESULT

    def test_apply_answer_does_not_modify_input(self):
        before, _ = _walk(*COMMERCIAL_MEDCO)
        snapshot = before.model_copy()
        apply_answer(before, "drugType", "ARV/Brand")
        assert before == snapshot


# ---------------------------------------------------------------------------
# Rejected answers
# ---------------------------------------------------------------------------

class TestRejectedAnswers:
    def test_unknown_key_is_invalid_field(self):
        with pytest.raises(InvalidField):
            apply_answer(Answers(), "favouriteColour", "blue")

    def test_path_cannot_be_answered(self):
        answers, _ = _walk(*COMMERCIAL_MEDCO)
        with pytest.raises(InvalidField, match="derived"):
            apply_answer(answers, "path", "LPAP")

    def test_field_not_yet_reached_is_rejected(self):
        with pytest.raises(FieldNotInPlay):
            apply_answer(Answers(), "mmcapPrice", 20)

    def test_field_on_other_branch_is_rejected(self):
        answers, _ = _walk(*COMMERCIAL_MEDCO, ("drugType", "RW Formulary"), ("rwPrimaryStatus", "covered"))
        with pytest.raises(FieldNotInPlay):
            apply_answer(answers, "mmcapPrice", 20)

    def test_arv_only_not_asked_for_medicare(self):
        answers, _ = _walk(*MEDICARE_DOH, ("drugType", "ARV/Brand"))
        with pytest.raises(FieldNotInPlay):
            apply_answer(answers, "isARVOnly", True)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), -1, 10 ** 400, "30", True, None])
    def test_bad_fpl_is_invalid_value(self, bad):
        answers, _ = _walk(*COMMERCIAL_MEDCO[:3])
        with pytest.raises(InvalidValue):
            apply_answer(answers, "fpl", bad)

    def test_bad_enum_value_is_invalid_value(self):
        answers, _ = _walk(*COMMERCIAL_MEDCO)
        with pytest.raises(InvalidValue):
            apply_answer(answers, "drugType", "Generic")

    def test_non_boolean_yes_no_is_invalid_value(self):
        with pytest.raises(InvalidValue):
            apply_answer(Answers(), "certified", "yes")

    def test_session_unchanged_after_rejection(self):
        session = EligibilitySession()
        for key, value in COMMERCIAL_MEDCO[:3]:
            session.apply_answer(key, value)
        before = session.answers

        with pytest.raises(InvalidValue):
            session.apply_answer("fpl", float("inf"))

        assert session.answers == before
        assert session.phase == Phase.FPL


# ---------------------------------------------------------------------------
# Session object
# ---------------------------------------------------------------------------

class TestEligibilitySession:
    def test_snake_case_keys_are_accepted(self):
        session = EligibilitySession()
        session.apply_answer("certified", True)
        phase = session.apply_answer("has_insurance", False)
        assert phase == Phase.RESULT

    def test_replaying_same_answer_is_idempotent(self):
        first = EligibilitySession()
        second = EligibilitySession()
        for key, value in COMMERCIAL_MEDCO:
            first.apply_answer(key, value)
            second.apply_answer(key, value)

        phase_a = first.apply_answer("drugType", "RW Formulary")
        phase_b = second.apply_answer("drugType", "RW Formulary")
        phase_b = second.apply_answer("drugType", "RW Formulary")

        assert phase_a == phase_b
        assert first.answers == second.answers

    def test_reset_returns_to_certification(self):
        session = EligibilitySession()
        for key, value in COMMERCIAL_MEDCO:
            session.apply_answer(key, value)

        session.reset()

        assert session.answers == Answers()
        assert session.phase == Phase.CERTIFICATION

    def test_rw_primary_status_enum_member_is_accepted(self):
        session = EligibilitySession()
        for key, value in COMMERCIAL_MEDCO:
            session.apply_answer(key, value)
        session.apply_answer("drugType", DrugType.RW_FORMULARY)
        session.apply_answer("rwPrimaryStatus", RwPrimaryStatus.DENIED)
        assert session.answers.rw_primary_status == RwPrimaryStatus.DENIED
