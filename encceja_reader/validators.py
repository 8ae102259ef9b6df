"""
Local rules applied to the model's answer.

The model output is untrusted: these deterministic checks run after
deserialization and never touch the transport.
"""

from typing import Any, Mapping

from .config import (
    ESSAY_GRADE_FIELD,
    ESSAY_PASSING_SCORE,
    OBJECTIVE_GRADE_FIELDS,
    OBJECTIVE_PASSING_SCORE,
    PERSON_NAME_MAX_TOKENS,
    PERSON_NAME_MIN_TOKENS,
)


def looks_like_person_name(text: Any) -> bool:
    """
    Guess whether a string is a person's name rather than an institution.

    A name has 2 to 4 whitespace-separated tokens, each starting with a
    capital letter. Capitalized institution names of the same length
    ("Instituto Federal Sul") also match; that false positive is accepted.

    Args:
        text: Candidate string. None, empty or non-string values never match.

    Returns:
        True if the text looks like a person's name.
    """
    if not text or not isinstance(text, str):
        return False

    words = text.split()

    if PERSON_NAME_MIN_TOKENS <= len(words) <= PERSON_NAME_MAX_TOKENS:
        return all(word[0] == word[0].upper() for word in words)

    return False


def sanitize_institution(value: Any) -> Any:
    """
    Drop a certifying institution that looks like a person's name.

    Args:
        value: Institution as returned by the model.

    Returns:
        None if the heuristic matches, otherwise the value unchanged.
    """
    if looks_like_person_name(value):
        return None
    return value


def compute_is_passing(grades: Mapping[str, float | None]) -> bool:
    """
    Apply the Encceja approval rule.

    Each objective area needs at least 100 and the essay at least 5.
    A missing grade is not disqualifying, so a card with every grade
    illegible counts as passing.

    Args:
        grades: Grades keyed by wire name; absent keys count as None.

    Returns:
        True if no present grade is below its threshold.
    """
    for field in OBJECTIVE_GRADE_FIELDS:
        grade = grades.get(field)
        if grade is not None and grade < OBJECTIVE_PASSING_SCORE:
            return False

    essay = grades.get(ESSAY_GRADE_FIELD)
    return essay is None or essay >= ESSAY_PASSING_SCORE
