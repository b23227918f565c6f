from enum import Enum
from functools import reduce

from eth_utils import function_signature_to_4byte_selector, to_bytes


class Capability(Enum):
    ERC165 = "0x01ffc9a7"
    ERC721 = "0x80ac58cd"
    ERC721Metadata = "0x5b5e139f"
    ERC721Enumerable = "0x780e9d63"
    ERC4907 = "0xad092b5c"

    @property
    def interface_id(self) -> bytes:
        return to_bytes(hexstr=self.value)


# function signatures each interface id is derived from
CAPABILITY_SIGNATURES = {
    Capability.ERC165: ["supportsInterface(bytes4)"],
    Capability.ERC721: [
        "balanceOf(address)",
        "ownerOf(uint256)",
        "safeTransferFrom(address,address,uint256,bytes)",
        "safeTransferFrom(address,address,uint256)",
        "transferFrom(address,address,uint256)",
        "approve(address,uint256)",
        "setApprovalForAll(address,bool)",
        "getApproved(uint256)",
        "isApprovedForAll(address,address)",
    ],
    Capability.ERC721Metadata: ["name()", "symbol()", "tokenURI(uint256)"],
    Capability.ERC721Enumerable: ["totalSupply()", "tokenOfOwnerByIndex(address,uint256)", "tokenByIndex(uint256)"],
    Capability.ERC4907: ["setUser(uint256,address,uint64)", "userOf(uint256)", "userExpires(uint256)"],
}

SUPPORTED_INTERFACES = frozenset(c.interface_id for c in Capability)


def compute_interface_id(signatures: list[str]) -> bytes:
    selectors = [int.from_bytes(function_signature_to_4byte_selector(s), "big") for s in signatures]
    return reduce(lambda a, b: a ^ b, selectors, 0).to_bytes(4, "big")


def normalize_interface_id(interface_id) -> bytes:
    match interface_id:
        case Capability():
            return interface_id.interface_id
        case bytes():
            value = interface_id
        case str():
            value = to_bytes(hexstr=interface_id)
        case int():
            value = interface_id.to_bytes(4, "big")
        case _:
            raise TypeError(f"unsupported interface id {interface_id!r}")
    if len(value) != 4:
        raise ValueError(f"interface id must be 4 bytes, got {len(value)}")
    return value


def supports_interface(interface_id) -> bool:
    return normalize_interface_id(interface_id) in SUPPORTED_INTERFACES
