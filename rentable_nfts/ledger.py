import contextlib
import copy
import logging
from typing import Callable

from .basetypes import MAX_UINT64, ZERO_ADDRESS, RentalRecord, to_address
from .clock import SystemClock
from .config import LedgerConfig
from .errors import (
    InvalidAddress,
    InvalidApproval,
    InvalidExpiration,
    InvalidToken,
    LedgerError,
    NotAuthorized,
    RenterActive,
)
from .events import Approval, ApprovalForAll, EventLog, Transfer, UpdateUser
from .interfaces import supports_interface
from .registry import OwnershipRegistry, is_token_id

logger = logging.getLogger(__name__)


class RentalLedger:
    """Token id to (user, expires) map.

    A record whose ``expires`` is not in the future is logically absent for
    ``user_of`` but keeps its stored values until overwritten or cleared.
    """

    def __init__(self, clock):
        self.clock = clock
        self.records: dict[int, RentalRecord] = {}

    def get(self, token_id: int) -> RentalRecord | None:
        return self.records.get(token_id) if is_token_id(token_id) else None

    def user_of(self, token_id: int) -> str:
        record = self.get(token_id)
        if record is None or not record.is_active(self.clock.now()):
            return ZERO_ADDRESS
        return record.user

    def user_expires(self, token_id: int) -> int:
        record = self.get(token_id)
        return record.expires if record is not None else 0

    def active_record(self, token_id: int) -> RentalRecord | None:
        record = self.get(token_id)
        if record is not None and record.is_active(self.clock.now()):
            return record
        return None

    def set(self, token_id: int, user: str, expires: int):
        self.records[token_id] = RentalRecord(user, expires)

    def clear(self, token_id: int) -> bool:
        return self.records.pop(token_id, None) is not None


def _revert(error: LedgerError) -> LedgerError:
    logger.info("reverted: %s %s", type(error).__name__, error.reason)
    return error


class RentableNFTs:
    """ERC721 token with the ERC4907 time bounded user role.

    Every mutator takes the caller as ``sender`` and validates the whole call
    before touching state, so a raised ``LedgerError`` leaves the ledger as it
    was. Events are published once the call has been applied.
    """

    def __init__(self, config: LedgerConfig | None = None, clock=None):
        self.config = config or LedgerConfig()
        self.clock = clock or SystemClock()
        self.registry = OwnershipRegistry()
        self.rentals = RentalLedger(self.clock)
        self.event_log = EventLog()

    # metadata and capabilities

    def name(self) -> str:
        return self.config.name

    def symbol(self) -> str:
        return self.config.symbol

    def supportsInterface(self, interface_id) -> bool:
        return supports_interface(interface_id)

    def tokenURI(self, tokenId: int) -> str:
        return self.registry.get_token(tokenId).uri

    # ownership queries

    def tokenExists(self, tokenId: int) -> bool:
        return self.registry.exists(tokenId)

    def ownerOf(self, tokenId: int) -> str:
        return self.registry.owner_of(tokenId)

    def balanceOf(self, owner: str) -> int:
        owner = to_address(owner)
        if owner == ZERO_ADDRESS:
            raise _revert(InvalidAddress("address zero is not a valid owner"))
        return self.registry.balance_of(owner)

    def getApproved(self, tokenId: int) -> str:
        return self.registry.get_approved(tokenId)

    def isApprovedForAll(self, owner: str, operator: str) -> bool:
        return self.registry.is_operator(to_address(owner), to_address(operator))

    def totalSupply(self) -> int:
        return self.registry.total_supply()

    def tokenByIndex(self, index: int) -> int:
        return self.registry.token_by_index(index)

    def tokenOfOwnerByIndex(self, owner: str, index: int) -> int:
        return self.registry.token_of_owner_by_index(to_address(owner), index)

    # rental queries

    def userOf(self, tokenId: int) -> str:
        return self.rentals.user_of(tokenId)

    def userExpires(self, tokenId: int) -> int:
        return self.rentals.user_expires(tokenId)

    # mutators

    def mint(self, uri: str, *, sender: str) -> int:
        sender = to_address(sender)
        token_id = self.registry.mint(sender, uri)
        self.event_log.publish([Transfer(ZERO_ADDRESS, sender, token_id)])
        return token_id

    def setUser(self, tokenId: int, user: str, expires: int, *, sender: str):
        sender = to_address(sender)
        user = to_address(user)
        if not self.registry.exists(tokenId):
            raise _revert(InvalidToken())
        if not self.registry.is_approved_or_owner(sender, tokenId):
            raise _revert(NotAuthorized())
        if isinstance(expires, bool) or not isinstance(expires, int) or not 0 <= expires <= MAX_UINT64:
            raise _revert(InvalidExpiration(f"expires out of range {expires!r}"))
        if not self.config.allow_owner_override_of_active_renter:
            active = self.rentals.active_record(tokenId)
            if active is not None and active.user != user:
                raise _revert(RenterActive())

        self.rentals.set(tokenId, user, expires)
        logger.debug("token %s user set to %s until %s by %s", tokenId, user, expires, sender)
        self.event_log.publish([UpdateUser(tokenId, user, expires)])

    def burn(self, tokenId: int, *, sender: str):
        sender = to_address(sender)
        if not self.registry.exists(tokenId) or self.registry.owner_of(tokenId) != sender:
            raise _revert(InvalidToken())

        events = []
        if self.rentals.clear(tokenId):
            events.append(UpdateUser(tokenId, ZERO_ADDRESS, 0))
        self.registry.burn(tokenId)
        events.append(Transfer(sender, ZERO_ADDRESS, tokenId))
        self.event_log.publish(events)

    def approve(self, to: str, tokenId: int, *, sender: str):
        sender = to_address(sender)
        to = to_address(to)
        owner = self.registry.owner_of(tokenId)
        if to == owner:
            raise _revert(InvalidApproval("approval to current owner"))
        if sender != owner and not self.registry.is_operator(owner, sender):
            raise _revert(NotAuthorized())

        self.registry.approve(tokenId, to)
        self.event_log.publish([Approval(owner, to, tokenId)])

    def setApprovalForAll(self, operator: str, approved: bool, *, sender: str):
        sender = to_address(sender)
        operator = to_address(operator)
        if operator == sender:
            raise _revert(InvalidApproval("approve to caller"))

        self.registry.set_operator(sender, operator, bool(approved))
        self.event_log.publish([ApprovalForAll(sender, operator, bool(approved))])

    def transferFrom(self, from_addr: str, to: str, tokenId: int, *, sender: str):
        sender = to_address(sender)
        from_addr = to_address(from_addr)
        to = to_address(to)
        owner = self.registry.owner_of(tokenId)
        if not self.registry.is_approved_or_owner(sender, tokenId):
            raise _revert(NotAuthorized())
        if from_addr != owner:
            raise _revert(InvalidAddress("transfer from incorrect owner"))
        if to == ZERO_ADDRESS:
            raise _revert(InvalidAddress("transfer to the zero address"))

        events = []
        if from_addr != to and self.config.clear_user_on_transfer and self.rentals.clear(tokenId):
            events.append(UpdateUser(tokenId, ZERO_ADDRESS, 0))
        self.registry.move(tokenId, to)
        events.append(Transfer(from_addr, to, tokenId))
        self.event_log.publish(events)

    def safeTransferFrom(self, from_addr: str, to: str, tokenId: int, data: bytes = b"", *, sender: str):
        # accounts never hold code here, so there is no receiver hook to call
        self.transferFrom(from_addr, to, tokenId, sender=sender)

    # events and snapshots

    def subscribe(self, handler: Callable) -> Callable:
        return self.event_log.subscribe(handler)

    def get_logs(self, name: str | None = None) -> list:
        return self.event_log.get_logs(name)

    @contextlib.contextmanager
    def anchor(self):
        registry = copy.deepcopy(self.registry)
        records = copy.deepcopy(self.rentals.records)
        events_count = len(self.event_log.events)
        try:
            yield
        finally:
            self.registry = registry
            self.rentals.records = records
            del self.event_log.events[events_count:]
