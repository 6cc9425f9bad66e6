"""
REGISTRO DE PROPIEDAD DE TOKENS NO FUNGIBLES

Semantica estandar de NFT: identificadores unicos, un propietario por token,
aprobaciones por token y transferencias autorizadas. Cada transferencia
(incluida la emision) queda en un registro ordenado.
"""
from ..logger import logger
from ..common.constants import ZERO_ADDRESS
from ..common.validators import normalize_address


class TokenError(ValueError):
    pass


class TokenNotFoundError(TokenError):
    pass


class TokenAlreadyExistsError(TokenError):
    pass


class TransferNotAuthorizedError(TokenError):
    pass


# los identificadores de token son enteros no negativos (bool y float no valen)
def is_valid_token_id(token_id) -> bool:
    return isinstance(token_id, int) and not isinstance(token_id, bool) and token_id >= 0


def ensure_token_id(token_id):
    if not is_valid_token_id(token_id):
        raise ValueError(f"Identificador de token no válido: {token_id!r}")


class TokenRegistry:
    def __init__(self, name: str, symbol: str):
        self.name = name
        self.symbol = symbol
        self._owners: dict[int, str] = {}
        self._approvals: dict[int, str] = {}
        self.transfer_log: list[tuple[str, str, int]] = []

    def exists(self, token_id: int) -> bool:
        return is_valid_token_id(token_id) and token_id in self._owners

    def owner_of(self, token_id: int) -> str:
        owner = self._owners.get(token_id) if is_valid_token_id(token_id) else None
        if owner is None:
            raise TokenNotFoundError(f"Token {token_id} no emitido")
        return owner

    def balance_of(self, address: str) -> int:
        address = normalize_address(address)
        return sum(1 for owner in self._owners.values() if owner == address)

    def tokens_of(self, address: str) -> list[int]:
        address = normalize_address(address)
        return sorted(t for t, owner in self._owners.items() if owner == address)

    def mint(self, to: str, token_id: int) -> None:
        ensure_token_id(token_id)
        to = normalize_address(to, "destinatario")
        if to == ZERO_ADDRESS:
            raise ValueError("No se puede emitir a la dirección cero")
        if token_id in self._owners:
            raise TokenAlreadyExistsError(f"Token {token_id} ya emitido")
        self._owners[token_id] = to
        self.transfer_log.append((ZERO_ADDRESS, to, token_id))
        logger.info(f"NFT: Token {token_id} emitido para {to}")

    # el propietario autoriza a otra cuenta a mover un token concreto
    def approve(self, caller: str, spender: str, token_id: int) -> None:
        caller = normalize_address(caller)
        spender = normalize_address(spender)
        if self.owner_of(token_id) != caller:
            logger.warning(f"NFT: {caller} intentó aprobar el token {token_id} sin ser propietario")
            raise TransferNotAuthorizedError("Solo el propietario puede aprobar el token")
        self._approvals[token_id] = spender
        logger.info(f"NFT: {spender} aprobado para el token {token_id}")

    def get_approved(self, token_id: int) -> str | None:
        self.owner_of(token_id)
        return self._approvals.get(token_id)

    def transfer_from(self, caller: str, sender: str, recipient: str, token_id: int) -> None:
        caller = normalize_address(caller)
        owner = self.owner_of(token_id)
        if caller != owner and self._approvals.get(token_id) != caller:
            logger.warning(f"NFT: {caller} no autorizado para mover el token {token_id}")
            raise TransferNotAuthorizedError("Quien llama no es propietario ni está aprobado")
        self.transfer(sender, recipient, token_id)

    # movimiento interno: lo usa el registro de entradas, que ya ha comprobado permisos
    def transfer(self, sender: str, recipient: str, token_id: int) -> None:
        sender = normalize_address(sender, "remitente")
        recipient = normalize_address(recipient, "destinatario")
        if recipient == ZERO_ADDRESS:
            raise ValueError("No se puede transferir a la dirección cero")
        if self.owner_of(token_id) != sender:
            raise TransferNotAuthorizedError(f"El token {token_id} no pertenece a {sender}")
        self._approvals.pop(token_id, None)
        self._owners[token_id] = recipient
        self.transfer_log.append((sender, recipient, token_id))
        logger.info(f"NFT: Token {token_id} transferido de {sender} a {recipient}")

    def snapshot(self) -> tuple:
        return dict(self._owners), dict(self._approvals), len(self.transfer_log)

    def restore(self, snapshot: tuple) -> None:
        owners, approvals, log_len = snapshot
        self._owners = dict(owners)
        self._approvals = dict(approvals)
        del self.transfer_log[log_len:]

    def to_dict(self) -> dict:
        # las claves JSON son cadenas: se guardan listas de pares
        return {
            "name": self.name,
            "symbol": self.symbol,
            "owners": [[t, o] for t, o in self._owners.items()],
            "approvals": [[t, a] for t, a in self._approvals.items()],
            "transfer_log": [list(entry) for entry in self.transfer_log],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TokenRegistry":
        registry = cls(data["name"], data["symbol"])
        registry._owners = {int(t): o for t, o in data.get("owners", [])}
        registry._approvals = {int(t): a for t, a in data.get("approvals", [])}
        registry.transfer_log = [(f, to, int(t)) for f, to, t in data.get("transfer_log", [])]
        return registry
