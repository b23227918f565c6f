import logging

from .basetypes import ZERO_ADDRESS, Token
from .errors import IndexOutOfRange, InvalidToken

logger = logging.getLogger(__name__)


def is_token_id(value) -> bool:
    # bool is an int subclass and True would alias token 1
    return isinstance(value, int) and not isinstance(value, bool)


class OwnershipRegistry:
    """Token ownership, approvals and enumeration.

    Authorization is decided by the callers; the registry only answers who owns
    or may operate a token and applies already validated changes. Owner
    enumeration uses swap-and-pop, so per-owner order is insertion order until
    a token leaves that owner.
    """

    def __init__(self):
        self.tokens: dict[int, Token] = {}
        self.last_token_id = 0
        self.all_tokens: list[int] = []
        self.all_tokens_index: dict[int, int] = {}
        self.owned_tokens: dict[str, list[int]] = {}
        self.owned_tokens_index: dict[int, int] = {}
        self.operators: dict[str, set[str]] = {}

    def exists(self, token_id: int) -> bool:
        return is_token_id(token_id) and token_id in self.tokens

    def get_token(self, token_id: int) -> Token:
        if not self.exists(token_id):
            raise InvalidToken()
        return self.tokens[token_id]

    def owner_of(self, token_id: int) -> str:
        return self.get_token(token_id).owner

    def balance_of(self, owner: str) -> int:
        return len(self.owned_tokens.get(owner, []))

    def total_supply(self) -> int:
        return len(self.all_tokens)

    def token_by_index(self, index: int) -> int:
        if not 0 <= index < len(self.all_tokens):
            raise IndexOutOfRange("global index out of bounds")
        return self.all_tokens[index]

    def token_of_owner_by_index(self, owner: str, index: int) -> int:
        owned = self.owned_tokens.get(owner, [])
        if not 0 <= index < len(owned):
            raise IndexOutOfRange("owner index out of bounds")
        return owned[index]

    def get_approved(self, token_id: int) -> str:
        return self.get_token(token_id).approved

    def is_operator(self, owner: str, operator: str) -> bool:
        return operator in self.operators.get(owner, set())

    def is_approved_or_owner(self, spender: str, token_id: int) -> bool:
        token = self.get_token(token_id)
        return spender == token.owner or spender == token.approved or self.is_operator(token.owner, spender)

    def mint(self, owner: str, uri: str) -> int:
        self.last_token_id += 1
        token_id = self.last_token_id
        self.tokens[token_id] = Token(token_id, owner, uri)
        self.all_tokens_index[token_id] = len(self.all_tokens)
        self.all_tokens.append(token_id)
        self._add_to_owner(owner, token_id)
        logger.debug("minted token %s to %s", token_id, owner)
        return token_id

    def burn(self, token_id: int):
        token = self.get_token(token_id)
        self._remove_from_owner(token.owner, token_id)

        index = self.all_tokens_index.pop(token_id)
        last_token_id = self.all_tokens.pop()
        if last_token_id != token_id:
            self.all_tokens[index] = last_token_id
            self.all_tokens_index[last_token_id] = index

        del self.tokens[token_id]
        logger.debug("burned token %s of %s", token_id, token.owner)

    def move(self, token_id: int, to: str):
        token = self.get_token(token_id)
        token.approved = ZERO_ADDRESS
        if token.owner == to:
            return
        self._remove_from_owner(token.owner, token_id)
        self._add_to_owner(to, token_id)
        logger.debug("moved token %s from %s to %s", token_id, token.owner, to)
        token.owner = to

    def approve(self, token_id: int, approved: str):
        self.get_token(token_id).approved = approved

    def set_operator(self, owner: str, operator: str, approved: bool):
        if approved:
            self.operators.setdefault(owner, set()).add(operator)
        else:
            self.operators.get(owner, set()).discard(operator)

    def _add_to_owner(self, owner: str, token_id: int):
        owned = self.owned_tokens.setdefault(owner, [])
        self.owned_tokens_index[token_id] = len(owned)
        owned.append(token_id)

    def _remove_from_owner(self, owner: str, token_id: int):
        owned = self.owned_tokens[owner]
        index = self.owned_tokens_index.pop(token_id)
        last_token_id = owned.pop()
        if last_token_id != token_id:
            owned[index] = last_token_id
            self.owned_tokens_index[last_token_id] = index
        if not owned:
            del self.owned_tokens[owner]
