"""
Core math modules для vault

Целочисленные примитивы и алгебра конверсии assets ↔ shares.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    Rounding,
    ceil_div,
    checked_add,
    checked_sub,
    mul_div,
    require_uint,
    saturating_sub,
)

# Share Math (Accounting Engine)
from src.core.math.share_math import (
    ExchangeState,
    convert_to_assets,
    convert_to_shares,
    preview_deposit,
    preview_mint,
    preview_redeem,
    preview_withdraw,
)

__all__ = [
    # Numerical Safeguards: Types
    "Rounding",
    # Numerical Safeguards: Functions
    "ceil_div",
    "checked_add",
    "checked_sub",
    "mul_div",
    "require_uint",
    "saturating_sub",
    # Share Math: Types
    "ExchangeState",
    # Share Math: Conversions
    "convert_to_assets",
    "convert_to_shares",
    # Share Math: Previews
    "preview_deposit",
    "preview_mint",
    "preview_redeem",
    "preview_withdraw",
]
