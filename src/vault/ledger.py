"""Ledger — учёт share токена (балансы, allowances, total supply).

Инвариант сохранения: sum(balances) == total_supply после каждой операции.
Ledger не проверяет lifecycle и не эмитит события — это делает vault.
"""

from typing import Dict, Optional, Tuple

from src.core.domain.errors import AllowanceError, InsufficientBalanceError
from src.core.domain.units import UINT256_MAX, validate_amount, validate_identity
from src.core.math.numerical_safeguards import checked_add, checked_sub
from src.vault.undo import UndoLog


class ShareLedger:
    """Ledger share токена.

    Все мутации атомарны: проверки выполняются до изменения состояния.
    Allowance равный UINT256_MAX считается бесконечным и не уменьшается.
    Каждое изменение ключа записывается в undo log для отката транзакции.
    """

    def __init__(self, undo: Optional[UndoLog] = None):
        self._undo = undo or UndoLog()
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply: int = 0

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def undo(self) -> UndoLog:
        return self._undo

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    def allowance(self, holder: str, spender: str) -> int:
        return self._allowances.get((holder, spender), 0)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def mint(self, to: str, amount: int) -> None:
        validate_identity(to, "receiver")
        validate_amount(amount, "shares", allow_zero=True)

        new_supply = checked_add(self._total_supply, amount)
        self._set_balance(to, self.balance_of(to) + amount)
        self._set_supply(new_supply)

    def burn(self, holder: str, amount: int) -> None:
        validate_identity(holder, "owner")
        validate_amount(amount, "shares", allow_zero=True)

        balance = self.balance_of(holder)
        if amount > balance:
            raise InsufficientBalanceError(
                f"Insufficient share balance: {holder} has {balance}, needs {amount}"
            )
        self._set_balance(holder, balance - amount)
        self._set_supply(checked_sub(self._total_supply, amount))

    def transfer(self, sender: str, to: str, amount: int) -> None:
        validate_identity(sender, "sender")
        validate_identity(to, "receiver")
        validate_amount(amount, "shares", allow_zero=True)

        balance = self.balance_of(sender)
        if amount > balance:
            raise InsufficientBalanceError(
                f"Insufficient share balance: {sender} has {balance}, needs {amount}"
            )
        self._set_balance(sender, balance - amount)
        self._set_balance(to, self.balance_of(to) + amount)

    def approve(self, holder: str, spender: str, amount: int) -> None:
        validate_identity(holder, "owner")
        validate_identity(spender, "spender")
        validate_amount(amount, "allowance", allow_zero=True)

        self._set_allowance(holder, spender, amount)

    def spend_allowance(self, holder: str, spender: str, amount: int) -> None:
        """Списание allowance spender'а у holder'а.

        Raises:
            AllowanceError: Если allowance меньше amount
        """
        current = self.allowance(holder, spender)
        if current == UINT256_MAX:
            return
        if amount > current:
            raise AllowanceError(
                f"Insufficient allowance: {spender} may spend {current} of {holder}, needs {amount}"
            )
        self._set_allowance(holder, spender, current - amount)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _set_balance(self, holder: str, value: int) -> None:
        self._undo.record(self._balances, holder)
        self._balances[holder] = value

    def _set_allowance(self, holder: str, spender: str, value: int) -> None:
        key = (holder, spender)
        self._undo.record(self._allowances, key)
        self._allowances[key] = value

    def _set_supply(self, value: int) -> None:
        self._undo.record_attr(self, "_total_supply")
        self._total_supply = value
