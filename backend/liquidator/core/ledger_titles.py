"""Ledger Titles — default display titles and rename rules for calculation records.

Invariants:
    - Default title is "<Type label> calculation #<N>", N = prior count for (user, type) + 1
    - N is fixed at creation; later deletions or renames never renumber a record
    - A rename must be non-blank after trimming; the stored title is the trimmed text

Design Decisions:
    - N is derived from the live record count, not a persisted counter: two
      concurrent creates may share a number (cosmetic, titles are not keys)
"""

from liquidator.core.domain_types import CalculationType
from liquidator.core.errors import InputValidationError

MAX_TITLE_LENGTH = 200


def default_title(calculation_type: CalculationType, prior_count: int) -> str:
    return f"{calculation_type.label} calculation #{prior_count + 1}"


def clean_title(title: str | None) -> str:
    """Trimmed title, or InputValidationError when blank or too long."""
    cleaned = (title or "").strip()
    if not cleaned:
        raise InputValidationError("Title cannot be empty", "title")
    if len(cleaned) > MAX_TITLE_LENGTH:
        raise InputValidationError(
            f"Title cannot exceed {MAX_TITLE_LENGTH} characters", "title",
        )
    return cleaned
