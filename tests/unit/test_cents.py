"""Tests for pg_common.cents: integer money helpers."""

import pytest

from src.pg_common.cents import apply_multiplier, bps_to_display, cents_to_display


class TestCentsToDisplay:
    def test_basic(self) -> None:
        assert cents_to_display(19200) == "₹192.00"

    def test_zero(self) -> None:
        assert cents_to_display(0) == "₹0.00"

    def test_one_paisa(self) -> None:
        assert cents_to_display(1) == "₹0.01"

    def test_thousands_separator(self) -> None:
        assert cents_to_display(150000) == "₹1,500.00"

    def test_negative(self) -> None:
        assert cents_to_display(-1200) == "-₹12.00"


class TestApplyMultiplier:
    def test_win(self) -> None:
        # 10000 * 19200 / 10000
        assert apply_multiplier(10000, 19200) == 19200

    def test_doji(self) -> None:
        assert apply_multiplier(10000, 13000) == 13000

    def test_floors_fractional_cents(self) -> None:
        # 3 * 1.92 = 5.76
        assert apply_multiplier(3, 19200) == 5

    @pytest.mark.parametrize(("amount", "bps"), [(0, 19200), (-5, 19200), (100, 0)])
    def test_non_positive_inputs_pay_nothing(self, amount: int, bps: int) -> None:
        assert apply_multiplier(amount, bps) == 0


class TestBpsToDisplay:
    def test_values(self) -> None:
        assert bps_to_display(19200) == "1.92x"
        assert bps_to_display(13000) == "1.30x"
        assert bps_to_display(10000) == "1.00x"
