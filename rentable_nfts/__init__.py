from .basetypes import MAX_UINT64, ZERO_ADDRESS, RentalRecord, Token, to_address
from .clock import ManualClock, SystemClock
from .config import Environment, LedgerConfig, load_config
from .errors import (
    IndexOutOfRange,
    InvalidAddress,
    InvalidApproval,
    InvalidExpiration,
    InvalidToken,
    LedgerError,
    NotAuthorized,
    RenterActive,
)
from .events import Approval, ApprovalForAll, Transfer, UpdateUser, decode_log, encode_log
from .interfaces import Capability
from .ledger import RentableNFTs, RentalLedger
from .registry import OwnershipRegistry

__version__ = "0.1.0"
