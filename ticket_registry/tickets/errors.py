# errores del registro de entradas: todos rechazan la llamada sin efectos parciales


class TicketRegistryError(Exception):
    pass


class AuthorizationError(TicketRegistryError):
    pass


class NotFoundError(TicketRegistryError):
    pass


class AlreadySoldError(TicketRegistryError):
    pass


class InsufficientPaymentError(TicketRegistryError):
    pass


class CapacityError(TicketRegistryError):
    pass


class InvalidPriceError(TicketRegistryError):
    pass


class DuplicateTokenError(TicketRegistryError):
    pass
