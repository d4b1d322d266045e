"""
ShareMath — Accounting Engine (конверсия assets ↔ shares)

Чистые функции конверсии между asset-суммами и share-суммами при заданных
total_assets и total_supply.

ПОЛИТИКА ОКРУГЛЕНИЯ (должна соблюдаться точно):
    preview_deposit  (assets → shares, получатель shares)  : DOWN
    preview_mint     (shares → assets, плательщик assets)  : UP
    preview_withdraw (assets → shares, сжигаемые shares)   : UP
    preview_redeem   (shares → assets, получатель assets)  : DOWN

Асимметрия гарантирует, что vault никогда не выплачивает больше, чем
держит. Цена — не более одной единицы dust на операцию, которая
остаётся оставшимся держателям shares.

BOOTSTRAP:
    total_supply == 0 → конверсия 1:1 (первый депозитор задаёт курс)
    Ветка нулевого supply срабатывает до любого деления.

ФОРМУЛЫ:
    shares = assets * total_supply / max(total_assets, 1)
    assets = shares * total_assets / total_supply
"""

from typing import NamedTuple

from src.core.math.numerical_safeguards import Rounding, mul_div, require_uint


# =============================================================================
# TYPES
# =============================================================================


class ExchangeState(NamedTuple):
    """Входные данные конверсии: total managed assets и total supply shares."""

    total_assets: int
    total_supply: int


# =============================================================================
# CONVERSIONS
# =============================================================================


def convert_to_shares(
    assets: int,
    total_assets: int,
    total_supply: int,
    rounding: Rounding = Rounding.DOWN,
) -> int:
    """
    Конверсия assets → shares.

    Args:
        assets: Сумма assets
        total_assets: Total managed assets vault
        total_supply: Total supply shares
        rounding: Направление округления

    Returns:
        Количество shares

    Examples:
        >>> convert_to_shares(100, 0, 0)
        100
        >>> convert_to_shares(1, 101, 100)
        0
        >>> convert_to_shares(1, 101, 100, Rounding.UP)
        1
    """
    require_uint(assets, "assets")
    require_uint(total_assets, "total_assets")
    require_uint(total_supply, "total_supply")

    if total_supply == 0:
        return assets

    # total_supply > 0 при total_assets == 0: shares обесценены,
    # знаменатель ограничен снизу единицей
    return mul_div(assets, total_supply, max(total_assets, 1), rounding)


def convert_to_assets(
    shares: int,
    total_assets: int,
    total_supply: int,
    rounding: Rounding = Rounding.DOWN,
) -> int:
    """
    Конверсия shares → assets.

    Examples:
        >>> convert_to_assets(100, 0, 0)
        100
        >>> convert_to_assets(1, 101, 100)
        1
        >>> convert_to_assets(1, 101, 100, Rounding.UP)
        2
    """
    require_uint(shares, "shares")
    require_uint(total_assets, "total_assets")
    require_uint(total_supply, "total_supply")

    if total_supply == 0:
        return shares

    return mul_div(shares, total_assets, total_supply, rounding)


# =============================================================================
# PREVIEWS
# =============================================================================


def preview_deposit(assets: int, state: ExchangeState) -> int:
    """Shares за депозит assets (DOWN)."""
    return convert_to_shares(assets, state.total_assets, state.total_supply, Rounding.DOWN)


def preview_mint(shares: int, state: ExchangeState) -> int:
    """Assets, необходимые для выпуска shares (UP)."""
    return convert_to_assets(shares, state.total_assets, state.total_supply, Rounding.UP)


def preview_withdraw(assets: int, state: ExchangeState) -> int:
    """Shares, сжигаемые за вывод assets (UP)."""
    return convert_to_shares(assets, state.total_assets, state.total_supply, Rounding.UP)


def preview_redeem(shares: int, state: ExchangeState) -> int:
    """Assets за погашение shares (DOWN)."""
    return convert_to_assets(shares, state.total_assets, state.total_supply, Rounding.DOWN)
