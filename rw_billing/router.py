"""
API endpoints for the eligibility walkthrough.

The server keeps no session state: the client sends the answers it holds
with every request and renders the SessionState it gets back.

GET  /api/session/new      — empty walkthrough
POST /api/session/answer   — apply one answer, return the next state
POST /api/session/evaluate — render state for a set of answers
POST /api/session/report   — plain-text summary for a set of answers
"""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from rw_billing.schemas import AnswerRequest, Answers, SessionState
from rw_billing.services.session import EligibilitySession
from rw_billing.utils.make_report import build_session_report
from rw_billing.validation import InvalidField, InvalidValue, fill_derived_path, validate_answers

logger = logging.getLogger(__name__)

router = APIRouter()


def _session_for(answers: Answers) -> EligibilitySession:
    answers = fill_derived_path(answers)
    errors = validate_answers(answers)
    if errors:
        raise HTTPException(status_code=422, detail=errors)
    return EligibilitySession(answers)


@router.get("/session/new", response_model=SessionState)
def new_session() -> SessionState:
    return EligibilitySession().snapshot()


@router.post("/session/answer", response_model=SessionState)
def answer(request: AnswerRequest) -> SessionState:
    """
    Apply one answer on top of the client's answers.

    Unknown or out-of-sequence fields return 400; values outside a field's
    domain return 422. In both cases nothing is applied.
    """
    session = _session_for(request.answers)

    try:
        session.apply_answer(request.key, request.value)
    except InvalidField as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except InvalidValue as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return session.snapshot()


@router.post("/session/evaluate", response_model=SessionState)
def evaluate(answers: Answers) -> SessionState:
    return _session_for(answers).snapshot()


@router.post("/session/report", response_class=PlainTextResponse)
def report(answers: Answers) -> str:
    try:
        return build_session_report(_session_for(answers).snapshot())
    except HTTPException:
        raise
    except Exception:
        logger.exception("Report generation failed")
        raise HTTPException(status_code=500, detail="Report generation failed.")
