"""
CADENA ANFITRIONA EN MEMORIA

Registra cuentas (clave publica -> direccion), lleva los nonces, despliega
registros de entradas y ejecuta transacciones firmadas contra ellos. La
identidad del que llama sale siempre de la firma verificada.
"""
from ..logger import logger
from ..common.validators import normalize_address
from ..crypto.address import address_from_pem, derive_contract_address
from ..tickets.models import EventDetails
from ..tickets.registry import TicketRegistry
from .balances import Ledger
from .context import CallContext
from .errors import UnknownAccountError, InvalidTransactionError
from .transactions import verify_transaction

# metodos que cambian estado (requieren transaccion firmada)
TRANSACTION_METHODS = {"mint", "buy_ticket", "update_event_details", "withdraw_balance"}
# el unico metodo que acepta valor adjunto
PAYABLE_METHODS = {"buy_ticket"}
# consultas de solo lectura
QUERY_METHODS = {
    "get_event_details",
    "get_ticket_details",
    "token_exists",
    "token_id_at",
    "get_available_tickets",
    "get_sold_tickets",
    "balance",
}


class Chain:
    def __init__(self, ledger: Ledger | None = None):
        self.ledger = ledger if ledger is not None else Ledger()
        self._accounts: dict[str, str] = {}
        self._nonces: dict[str, int] = {}
        self._contracts: dict[str, TicketRegistry] = {}

    def register_account(self, public_key_pem: str) -> str:
        address = address_from_pem(public_key_pem)
        self._accounts[address] = public_key_pem
        self._nonces.setdefault(address, 0)
        logger.info(f"CHAIN: Cuenta registrada {address}")
        return address

    def _require_account(self, address: str) -> str:
        address = normalize_address(address)
        if address not in self._accounts:
            raise UnknownAccountError(f"Cuenta no registrada: {address}")
        return address

    # grifo: abona valor nuevo a una cuenta
    def fund(self, address: str, amount: int) -> None:
        self.ledger.credit(address, amount)

    def balance_of(self, address: str) -> int:
        return self.ledger.balance_of(address)

    def nonce_of(self, address: str) -> int:
        return self._nonces.get(normalize_address(address), 0)

    def deploy_registry(self, owner: str, details: EventDetails | None = None, **kwargs) -> TicketRegistry:
        owner = self._require_account(owner)
        nonce = self._nonces[owner]
        address = derive_contract_address(owner, nonce)
        registry = TicketRegistry(owner, ledger=self.ledger, details=details, address=address, **kwargs)
        self._contracts[address] = registry
        self._nonces[owner] = nonce + 1
        logger.info(f"CHAIN: Registro desplegado en {address} por {owner}")
        return registry

    def get_contract(self, address: str) -> TicketRegistry:
        contract = self._contracts.get(normalize_address(address))
        if contract is None:
            raise UnknownAccountError(f"No hay contrato en {address}")
        return contract

    def submit(self, wrapper: dict):
        payload = wrapper.get("payload") if isinstance(wrapper, dict) else None
        if not isinstance(payload, dict):
            raise InvalidTransactionError("Transacción sin payload")
        try:
            sender = self._require_account(payload.get("from"))
        except ValueError as e:
            logger.warning(f"CHAIN: Remitente rechazado: {e}")
            raise
        if not verify_transaction(wrapper, self._accounts[sender]):
            logger.warning(f"CHAIN: Firma no válida para {sender}")
            raise InvalidTransactionError("Firma de la transacción no válida")
        if payload.get("nonce") != self._nonces[sender]:
            logger.warning(f"CHAIN: Nonce {payload.get('nonce')!r} inesperado para {sender}")
            raise InvalidTransactionError(f"Nonce esperado {self._nonces[sender]}")

        method = payload.get("method")
        if method not in TRANSACTION_METHODS:
            raise InvalidTransactionError(f"Método no permitido: {method!r}")
        value = payload.get("value", 0)
        if value and method not in PAYABLE_METHODS:
            raise InvalidTransactionError(f"El método '{method}' no admite valor adjunto")
        contract = self.get_contract(payload.get("to"))

        # a partir de aqui la transaccion esta autenticada: el nonce se consume aunque la llamada falle
        self._nonces[sender] += 1
        ctx = CallContext(sender=sender, value=value)
        logger.info(f"CHAIN: Ejecutando {method} de {sender} (nonce {payload['nonce']})")
        return getattr(contract, method)(ctx, *payload.get("args", []))

    def call(self, contract_address: str, method: str, *args):
        if method not in QUERY_METHODS:
            raise InvalidTransactionError(f"Consulta no permitida: {method!r}")
        return getattr(self.get_contract(contract_address), method)(*args)
