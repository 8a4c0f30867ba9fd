"""
Registration Selectors

Query functions for program registrations and form questions.
"""
from uuid import UUID

from apps.core.models import ProgramFormQuestion, ProgramRegistration

from .answers import parse_answers


def get_program_questions(program_id: UUID) -> list[dict]:
    """Form questions for a program in ascending sort_order."""
    return list(
        ProgramFormQuestion.objects  # type: ignore[attr-defined]
        .filter(program_id=program_id)
        .order_by('sort_order')
        .values('id', 'question_text', 'question_type', 'options', 'is_required', 'sort_order')
    )


def get_program_registrations(program_id: UUID, panchayath_id: str | None = None) -> list[dict]:
    """
    Registrations for a program, newest first.

    Args:
        program_id: The program UUID
        panchayath_id: Optional filter on answers._fixed.panchayath_id
    """
    rows = list(
        ProgramRegistration.objects  # type: ignore[attr-defined]
        .filter(program_id=program_id)
        .order_by('-created_at')
        .values('id', 'program_id', 'answers', 'created_at')
    )

    if panchayath_id:
        rows = [
            row for row in rows
            if parse_answers(row['answers']).fixed.panchayath_id == str(panchayath_id)
        ]

    return rows
