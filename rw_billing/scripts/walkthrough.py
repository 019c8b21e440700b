#!/usr/bin/env python3
"""
Terminal walkthrough for the pharmacy billing decision flow.

Asks each question in turn and prints the billing sequence report at the end.
Malformed numbers are not submitted; the question is asked again.

Usage:
    python -m rw_billing.scripts.walkthrough
    python -m rw_billing.scripts.walkthrough --answers '{"certified": true, "hasInsurance": false}'
"""

import argparse
import json
import logging
import sys
from typing import Callable

from pydantic import ValidationError

from rw_billing.schemas import Answers, Question
from rw_billing.services.session import EligibilitySession
from rw_billing.utils.make_report import build_session_report
from rw_billing.validation import (
    InvalidValue,
    fill_derived_path,
    parse_numeric_input,
    validate_answers,
)


def _ask(question: Question, read: Callable[[str], str], write: Callable[[str], None]):
    """Prompt until a usable value is typed. Returns the value to submit."""
    write("")
    write(question.prompt)
    if question.hint:
        write(f"  ({question.hint})")

    if question.input_kind == "number":
        while True:
            value = parse_numeric_input(read(f"{question.placeholder or 'Enter a number'}: "))
            if value is not None:
                return value
            write("Please enter a number.")

    for idx, option in enumerate(question.options, start=1):
        write(f"  {idx}. {option.label}")
    while True:
        choice = read("Choose an option: ").strip()
        if choice.isdigit() and 1 <= int(choice) <= len(question.options):
            return question.options[int(choice) - 1].value
        write(f"Please choose 1-{len(question.options)}.")


def run_interactive(
    session: EligibilitySession,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> str:
    """Drive the session to the Result phase and return the final report."""
    question = session.current_question()
    while question is not None:
        value = _ask(question, read, write)
        try:
            session.apply_answer(question.field, value)
        except InvalidValue as exc:
            write(str(exc))
        question = session.current_question()

    return build_session_report(session.snapshot())


def main(argv=None):
    parser = argparse.ArgumentParser(description="Walk through the RW pharmacy billing decision flow")
    parser.add_argument("--answers", help="JSON object of answers to evaluate without prompting")
    parser.add_argument("--verbose", action="store_true", help="Log every transition")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.answers:
        try:
            answers = fill_derived_path(Answers.model_validate(json.loads(args.answers)))
        except (json.JSONDecodeError, ValidationError) as exc:
            print(f"Invalid --answers: {exc}", file=sys.stderr)
            sys.exit(2)
        errors = validate_answers(answers)
        if errors:
            for error in errors:
                print(f"Invalid --answers: {error}", file=sys.stderr)
            sys.exit(2)
        print(build_session_report(EligibilitySession(answers).snapshot()))
        return

    try:
        print(run_interactive(EligibilitySession()))
    except (KeyboardInterrupt, EOFError):
        print()
        sys.exit(130)


if __name__ == "__main__":
    main()
