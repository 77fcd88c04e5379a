"""Tests for ledger title rules — default numbering and rename validation."""

import pytest

from liquidator.core.domain_types import CalculationType
from liquidator.core.errors import InputValidationError
from liquidator.core.ledger_titles import MAX_TITLE_LENGTH, clean_title, default_title


def test_first_title_is_number_one():
    assert default_title(CalculationType.LIQUIDATION_TARGET, 0) == (
        "Liquidation calculation #1"
    )


def test_title_number_follows_prior_count():
    assert default_title(CalculationType.LIQUIDATION_TARGET, 4).endswith("#5")


def test_clean_title_trims():
    assert clean_title("  Q3 rebalance  ") == "Q3 rebalance"


@pytest.mark.parametrize("title", ["", "   ", "\t\n", None])
def test_blank_title_rejected(title):
    with pytest.raises(InputValidationError) as exc:
        clean_title(title)
    assert exc.value.field == "title"


def test_overlong_title_rejected():
    with pytest.raises(InputValidationError):
        clean_title("x" * (MAX_TITLE_LENGTH + 1))
