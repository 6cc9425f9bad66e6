from dataclasses import dataclass, asdict, fields


@dataclass
class Ticket:
    index: int     # posicion en la lista de entradas del evento
    token_id: int  # identificador del token, independiente de la posicion
    price: int     # precio exacto en wei
    sold: bool = False

    def __post_init__(self):
        for field in ("index", "token_id", "price"):
            value = getattr(self, field)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"El campo '{field}' debe ser un entero no negativo")

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "Ticket":
        return Ticket(**data)


@dataclass
class EventDetails:
    name: str = ""
    date: str = ""
    time: str = ""
    venue: str = ""
    description: str = ""
    social_media_link: str = ""
    virtual_event_link: str = ""
    virtual_event_credentials: str = ""

    def __post_init__(self):
        # texto libre sin mas validacion, pero nunca None
        for f in fields(self):
            if getattr(self, f.name) is None:
                setattr(self, f.name, "")

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "EventDetails":
        return EventDetails(**data)


# notificacion emitida en cada compra
@dataclass(frozen=True)
class TicketPurchased:
    token_id: int
    buyer: str
    price: int
