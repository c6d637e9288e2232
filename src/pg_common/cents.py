"""Integer arithmetic utilities for cents-based balances.

All amounts, balances and payouts use int (cents). Multipliers use
basis points (19200 = 1.92x). No float, no Decimal on the money path.
"""

BPS_DENOMINATOR = 10000


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 19200 -> '₹192.00', -1200 -> '-₹12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-₹{abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"₹{cents // 100:,}.{cents % 100:02d}"


def apply_multiplier(amount: int, multiplier_bps: int) -> int:
    """Payout for a winning stake, floored so the house never over-pays.

    payout = floor(amount * multiplier_bps / 10000)
    """
    if amount <= 0 or multiplier_bps <= 0:
        return 0
    return (amount * multiplier_bps) // BPS_DENOMINATOR


def bps_to_display(multiplier_bps: int) -> str:
    """19200 -> '1.92x'."""
    return f"{multiplier_bps // BPS_DENOMINATOR}.{(multiplier_bps % BPS_DENOMINATOR) // 100:02d}x"
