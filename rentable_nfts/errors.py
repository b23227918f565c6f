class LedgerError(Exception):
    reason = "reverted"

    def __init__(self, reason: str | None = None):
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class InvalidToken(LedgerError):
    reason = "Invalid token ID."


class NotAuthorized(LedgerError):
    reason = "caller is not owner nor approved"


class IndexOutOfRange(LedgerError):
    reason = "index out of bounds"


class InvalidAddress(LedgerError):
    reason = "invalid address"


class InvalidExpiration(LedgerError):
    reason = "expires out of range"


class InvalidApproval(LedgerError):
    reason = "invalid approval"


class RenterActive(LedgerError):
    reason = "NFT is already rented"
