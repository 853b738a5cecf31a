"""
Balance Validation Unit Tests

Tests validate_sufficient, including randomized cases over the full
256-bit range (seeded so failures reproduce).
"""

import random
import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from arb_client.errors import ConfigurationError, InsufficientFundsError
from arb_client.modules.validation import validate_sufficient
from arb_client.types import UINT256_MAX


def _random_cases(seed, count=200):
    rng = random.Random(seed)
    bounds = [2 ** 64, 2 ** 128, UINT256_MAX]
    cases = []
    for _ in range(count):
        upper = rng.choice(bounds)
        cases.append((rng.randint(0, upper), rng.randint(0, upper), rng.randint(0, upper)))
    return cases


class TestValidateSufficient:
    """Tests for the balance check"""

    def test_exact_balance_passes(self):
        validate_sufficient(balance=1050, transfer_amount=1000, estimated_fee=50)

    def test_surplus_passes(self):
        validate_sufficient(balance=10 ** 18, transfer_amount=10 ** 15, estimated_fee=2_100_000_000_000)

    def test_one_wei_short_fails(self):
        with pytest.raises(InsufficientFundsError) as exc_info:
            validate_sufficient(balance=1049, transfer_amount=1000, estimated_fee=50)

        error = exc_info.value
        assert error.required == 1050
        assert error.amount == 1000
        assert error.fee == 50
        assert error.balance == 1049
        assert error.shortfall == 1
        assert error.overflow is False

    def test_zero_balance_fails_for_fee_alone(self):
        with pytest.raises(InsufficientFundsError):
            validate_sufficient(balance=0, transfer_amount=0, estimated_fee=1)

    def test_zero_everything_passes(self):
        validate_sufficient(0, 0, 0)

    def test_overflowing_sum_is_insufficient(self):
        with pytest.raises(InsufficientFundsError) as exc_info:
            validate_sufficient(balance=UINT256_MAX, transfer_amount=UINT256_MAX, estimated_fee=1)
        assert exc_info.value.overflow is True
        assert exc_info.value.required == UINT256_MAX + 1

    def test_max_balance_covers_max_total(self):
        validate_sufficient(balance=UINT256_MAX, transfer_amount=UINT256_MAX - 10, estimated_fee=10)

    def test_negative_input_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            validate_sufficient(balance=100, transfer_amount=-1, estimated_fee=0)

    def test_non_integer_input_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            validate_sufficient(balance=100.0, transfer_amount=1, estimated_fee=0)

    @pytest.mark.parametrize("balance,amount,fee", _random_cases(seed=421614))
    def test_succeeds_iff_balance_covers_total(self, balance, amount, fee):
        should_pass = balance >= amount + fee

        if should_pass:
            validate_sufficient(balance, amount, fee)
        else:
            with pytest.raises(InsufficientFundsError) as exc_info:
                validate_sufficient(balance, amount, fee)
            assert exc_info.value.shortfall == amount + fee - balance
            assert exc_info.value.overflow == (amount + fee > UINT256_MAX)
