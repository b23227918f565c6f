from dataclasses import dataclass

from eth_utils import is_address, to_checksum_address

from .errors import InvalidAddress

ZERO_ADDRESS = "0x" + "00" * 20
MAX_UINT64 = 2**64 - 1


def to_address(value) -> str:
    if not isinstance(value, (str, bytes)) or not is_address(value):
        raise InvalidAddress(f"invalid address {value!r}")
    return to_checksum_address(value)


@dataclass
class RentalRecord:
    user: str = ZERO_ADDRESS
    expires: int = 0

    def is_active(self, now: int) -> bool:
        return self.expires > now

    def to_tuple(self):
        return (self.user, self.expires)


@dataclass
class Token:
    token_id: int
    owner: str
    uri: str
    approved: str = ZERO_ADDRESS

    def to_tuple(self):
        return (self.token_id, self.owner, self.uri, self.approved)
