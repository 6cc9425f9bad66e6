# errores del libro mayor y de la cadena anfitriona


class LedgerError(ValueError):
    pass


class InsufficientFundsError(LedgerError):
    pass


class UnknownAccountError(LedgerError):
    pass


class InvalidTransactionError(LedgerError):
    pass
