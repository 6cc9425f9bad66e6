"""
REGISTRO DE ENTRADAS DE UN EVENTO SOBRE TOKENS NO FUNGIBLES

Cada entrada es un token unico emitido para el organizador (propietario del
registro) y transferido al comprador cuando paga el precio exacto. La politica
de pago es unica: el valor adjunto debe coincidir con el precio y cada compra
emite una notificacion TicketPurchased; no hay devolucion de excedentes.
"""
import functools

from ..config import MAX_TICKETS, BASE_TICKET_PRICE, TOKEN_NAME, TOKEN_SYMBOL
from ..logger import logger
from ..common.validators import normalize_address, ensure_non_negative_amount
from ..crypto.address import derive_contract_address
from ..ledger.balances import Ledger
from ..ledger.context import CallContext
from ..nft.tokens import TokenRegistry, is_valid_token_id
from .models import Ticket, EventDetails, TicketPurchased
from .errors import (
    AuthorizationError,
    NotFoundError,
    AlreadySoldError,
    InsufficientPaymentError,
    CapacityError,
    InvalidPriceError,
    DuplicateTokenError,
)


# guarda unica para las operaciones reservadas al propietario
def only_owner(method):
    @functools.wraps(method)
    def wrapper(self, ctx: CallContext, *args, **kwargs):
        if ctx.sender != self.owner:
            logger.warning(f"REGISTRY: {ctx.sender} no autorizado para '{method.__name__}'")
            raise AuthorizationError(f"Solo el propietario puede llamar a '{method.__name__}'")
        return method(self, ctx, *args, **kwargs)
    return wrapper


# si la llamada falla se deshace todo lo que haya cambiado (registro, tokens y saldos)
def atomic(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        snapshot = self._snapshot()
        try:
            return method(self, *args, **kwargs)
        except Exception:
            self._restore(snapshot)
            raise
    return wrapper


class TicketRegistry:
    def __init__(
        self,
        owner: str,
        ledger: Ledger | None = None,
        tokens: TokenRegistry | None = None,
        details: EventDetails | None = None,
        address: str | None = None,
        max_tickets: int | None = None,
        base_price: int | None = None,
    ):
        self.owner = normalize_address(owner, "propietario")
        self.address = normalize_address(address) if address else derive_contract_address(self.owner, 0)
        self.max_tickets = MAX_TICKETS if max_tickets is None else max_tickets
        self.base_price = BASE_TICKET_PRICE if base_price is None else base_price
        ensure_non_negative_amount(self.max_tickets, "max_tickets")
        ensure_non_negative_amount(self.base_price, "base_price")
        self.ledger = ledger if ledger is not None else Ledger()
        self.tokens = tokens if tokens is not None else TokenRegistry(TOKEN_NAME, TOKEN_SYMBOL)
        self.details = details if details is not None else EventDetails()
        self.tickets: list[Ticket] = []
        self._by_token: dict[int, Ticket] = {}
        self.total_sold = 0
        self.notifications: list[TicketPurchased] = []

    # OPERACIONES DEL PROPIETARIO

    @only_owner
    @atomic
    def mint(self, ctx: CallContext, token_id: int, price: int) -> Ticket:
        if self.tokens.exists(token_id):
            logger.warning(f"REGISTRY: Emisión rechazada, token {token_id} duplicado")
            raise DuplicateTokenError(f"El token {token_id} ya existe")
        if isinstance(price, bool) or not isinstance(price, int) or price < self.base_price:
            logger.warning(f"REGISTRY: Emisión rechazada, precio {price!r} < {self.base_price}")
            raise InvalidPriceError(f"El precio mínimo es {self.base_price} wei")
        if len(self.tickets) >= self.max_tickets:
            logger.warning(f"REGISTRY: Emisión rechazada, aforo completo ({self.max_tickets})")
            raise CapacityError(f"Se ha alcanzado el máximo de {self.max_tickets} entradas")

        ticket = Ticket(index=len(self.tickets), token_id=token_id, price=price)
        self.tokens.mint(self.owner, token_id)
        self.tickets.append(ticket)
        self._by_token[token_id] = ticket
        logger.info(f"REGISTRY: Entrada {ticket.index} emitida como token {token_id} por {price} wei")
        return ticket

    @only_owner
    @atomic
    def update_event_details(
        self,
        ctx: CallContext,
        name: str,
        date: str,
        time: str,
        venue: str,
        description: str,
        social_media_link: str,
        virtual_event_link: str,
        virtual_event_credentials: str,
    ) -> None:
        # siempre se sustituyen todos los campos
        self.details = EventDetails(
            name=name,
            date=date,
            time=time,
            venue=venue,
            description=description,
            social_media_link=social_media_link,
            virtual_event_link=virtual_event_link,
            virtual_event_credentials=virtual_event_credentials,
        )
        logger.info(f"REGISTRY: Detalles del evento actualizados ({name})")

    @only_owner
    @atomic
    def withdraw_balance(self, ctx: CallContext) -> int:
        amount = self.ledger.balance_of(self.address)
        self.ledger.transfer(self.address, self.owner, amount)
        logger.info(f"REGISTRY: Retirados {amount} wei al propietario")
        return amount

    # COMPRA

    @atomic
    def buy_ticket(self, ctx: CallContext, token_id: int) -> TicketPurchased:
        try:
            ticket = self._ticket_for(token_id)
        except NotFoundError:
            logger.warning(f"REGISTRY: Compra rechazada, token {token_id!r} inexistente")
            raise
        if ticket.sold:
            logger.warning(f"REGISTRY: Compra rechazada, token {token_id} ya vendido")
            raise AlreadySoldError(f"La entrada del token {token_id} ya está vendida")
        if ctx.value != ticket.price:
            logger.warning(f"REGISTRY: Compra rechazada, pago {ctx.value} != precio {ticket.price}")
            raise InsufficientPaymentError(f"El pago debe ser exactamente {ticket.price} wei")

        self.ledger.transfer(ctx.sender, self.address, ticket.price)
        ticket.sold = True
        self.total_sold += 1
        self.tokens.transfer(self.owner, ctx.sender, token_id)

        notification = TicketPurchased(token_id=token_id, buyer=ctx.sender, price=ticket.price)
        self.notifications.append(notification)
        logger.info(f"REGISTRY: Token {token_id} comprado por {ctx.sender} ({ticket.price} wei)")
        return notification

    # CONSULTAS

    def get_event_details(self) -> dict:
        info = self.details.to_dict()
        info.update({
            "ticket_count": len(self.tickets),
            "max_tickets": self.max_tickets,
            "total_sold": self.total_sold,
        })
        return info

    # solo enteros no negativos: True o 1.0 no pueden suplantar al token 1
    def _ticket_for(self, token_id) -> Ticket:
        ticket = self._by_token.get(token_id) if is_valid_token_id(token_id) else None
        if ticket is None:
            raise NotFoundError(f"El token {token_id!r} no existe")
        return ticket

    def get_ticket_details(self, token_id: int) -> tuple[int, int, bool]:
        ticket = self._ticket_for(token_id)
        return ticket.index, ticket.price, ticket.sold

    def token_exists(self, token_id: int) -> bool:
        return self.tokens.exists(token_id)

    def token_id_at(self, index: int) -> int:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self.tickets):
            raise NotFoundError(f"No hay entrada en la posición {index!r}")
        return self.tickets[index].token_id

    def get_available_tickets(self) -> list[int]:
        return [t.index for t in self.tickets if not t.sold]

    def get_sold_tickets(self) -> list[int]:
        return [t.index for t in self.tickets if t.sold]

    def balance(self) -> int:
        return self.ledger.balance_of(self.address)

    # ESTADO

    def _snapshot(self) -> tuple:
        # las entradas solo se añaden y solo cambia 'sold': basta con la longitud y los flags
        return (
            [t.sold for t in self.tickets],
            self.total_sold,
            self.details,
            len(self.notifications),
            self.ledger.snapshot(),
            self.tokens.snapshot(),
        )

    def _restore(self, snapshot: tuple) -> None:
        sold_flags, total_sold, details, n_notifications, ledger_snap, tokens_snap = snapshot
        del self.tickets[len(sold_flags):]
        for ticket, sold in zip(self.tickets, sold_flags):
            ticket.sold = sold
        self._by_token = {t.token_id: t for t in self.tickets}
        self.total_sold = total_sold
        self.details = details
        del self.notifications[n_notifications:]
        self.ledger.restore(ledger_snap)
        self.tokens.restore(tokens_snap)
        logger.debug("REGISTRY: Estado restaurado tras una llamada fallida")

    def to_dict(self) -> dict:
        return {
            "owner": self.owner,
            "address": self.address,
            "max_tickets": self.max_tickets,
            "base_price": self.base_price,
            "details": self.details.to_dict(),
            "tickets": [t.to_dict() for t in self.tickets],
            "total_sold": self.total_sold,
            "notifications": [[n.token_id, n.buyer, n.price] for n in self.notifications],
        }

    @classmethod
    def from_dict(cls, data: dict, ledger: Ledger, tokens: TokenRegistry) -> "TicketRegistry":
        registry = cls(
            owner=data["owner"],
            ledger=ledger,
            tokens=tokens,
            details=EventDetails.from_dict(data["details"]),
            address=data["address"],
            max_tickets=data["max_tickets"],
            base_price=data["base_price"],
        )
        registry.tickets = [Ticket.from_dict(t) for t in data.get("tickets", [])]
        registry._by_token = {t.token_id: t for t in registry.tickets}
        registry.total_sold = data.get("total_sold", 0)
        registry.notifications = [TicketPurchased(t, b, p) for t, b, p in data.get("notifications", [])]
        # el contador debe coincidir con las entradas vendidas
        if registry.total_sold != sum(1 for t in registry.tickets if t.sold):
            raise ValueError("Estado inconsistente: total_sold no coincide con las entradas vendidas")
        return registry
