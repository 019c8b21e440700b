"""
EligibilitySession: one patient walkthrough.

Holds the single Answers record for the session. apply_answer is the only
mutator; every other method is a pure read of the current answers.
"""

import logging
from typing import Any, Optional

from rw_billing.prompts.questions import build_question
from rw_billing.rules.billing_sequence import billing_sequence
from rw_billing.rules.result import calculate_result
from rw_billing.rules.selections import selections
from rw_billing.rules.traffic import traffic_state
from rw_billing.schemas import (
    Answers,
    AssessmentResult,
    BillingSequence,
    Phase,
    Question,
    Selection,
    SessionState,
    Step,
    TrafficState,
)
from rw_billing.services import transitions
from rw_billing.validation import InvalidField, InvalidValue

logger = logging.getLogger(__name__)


class EligibilitySession:
    def __init__(self, answers: Optional[Answers] = None):
        self.answers = answers if answers is not None else Answers()

    @property
    def phase(self) -> Phase:
        return transitions.derive_phase(self.answers)

    @property
    def step(self) -> Step:
        return transitions.current_step(self.answers)

    def apply_answer(self, key: str, value: Any) -> Phase:
        """
        Record one answer and return the next phase.

        On InvalidField or InvalidValue the answers are left untouched.
        """
        try:
            self.answers, phase = transitions.apply_answer(self.answers, key, value)
        except (InvalidField, InvalidValue) as exc:
            logger.warning("Rejected answer %s=%r: %s", key, value, exc)
            raise
        return phase

    def reset(self) -> None:
        self.answers = Answers()
        logger.debug("Session reset")

    def traffic_state(self) -> TrafficState:
        return traffic_state(self.answers)

    def billing_sequence(self) -> BillingSequence:
        return billing_sequence(self.answers)

    def selections(self) -> list[Selection]:
        return selections(self.answers)

    def result(self) -> AssessmentResult:
        return calculate_result(self.answers)

    def current_question(self) -> Optional[Question]:
        return build_question(self.answers)

    def snapshot(self) -> SessionState:
        """Everything the UI needs to render the current point in the walkthrough."""
        return SessionState(
            answers=self.answers,
            phase=self.phase,
            step=self.step,
            question=self.current_question(),
            traffic=self.traffic_state(),
            billing_sequence=self.billing_sequence(),
            selections=self.selections(),
            result=self.result(),
        )
