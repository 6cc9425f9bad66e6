"""
LIBRO MAYOR DE SALDOS: primitiva de movimiento de valor entre cuentas
"""
from ..logger import logger
from ..common.validators import normalize_address, ensure_non_negative_amount
from .errors import InsufficientFundsError


class Ledger:
    def __init__(self, balances: dict | None = None):
        # saldos en wei por direccion normalizada
        self._balances: dict[str, int] = {}
        for address, amount in (balances or {}).items():
            ensure_non_negative_amount(amount)
            if amount:
                self._balances[normalize_address(address)] = amount

    def balance_of(self, address: str) -> int:
        return self._balances.get(normalize_address(address), 0)

    # crea valor nuevo en una cuenta (lo usa el grifo de la cadena y los tests)
    def credit(self, address: str, amount: int) -> None:
        key = normalize_address(address)
        ensure_non_negative_amount(amount)
        self._balances[key] = self._balances.get(key, 0) + amount
        logger.info(f"LEDGER: Abonados {amount} wei a {key}")

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        src = normalize_address(sender, "remitente")
        dst = normalize_address(recipient, "destinatario")
        ensure_non_negative_amount(amount)
        available = self._balances.get(src, 0)
        if available < amount:
            logger.warning(f"LEDGER: Saldo insuficiente en {src}: {available} < {amount}")
            raise InsufficientFundsError(f"Saldo insuficiente: {available} < {amount}")
        if amount == 0 or src == dst:
            return
        self._balances[src] = available - amount
        if not self._balances[src]:
            del self._balances[src]
        self._balances[dst] = self._balances.get(dst, 0) + amount
        logger.info(f"LEDGER: Transferidos {amount} wei de {src} a {dst}")

    def total_supply(self) -> int:
        return sum(self._balances.values())

    # copia del estado para poder deshacer una llamada fallida
    def snapshot(self) -> dict:
        return dict(self._balances)

    def restore(self, snapshot: dict) -> None:
        self._balances = dict(snapshot)

    def to_dict(self) -> dict:
        return {"balances": dict(self._balances)}

    @classmethod
    def from_dict(cls, data: dict) -> "Ledger":
        return cls(balances=data.get("balances", {}))
