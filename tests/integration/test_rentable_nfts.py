from rentable_nfts import ZERO_ADDRESS, UpdateUser

from ..conftest_base import ONE_DAY, ONE_HOUR, get_events, get_last_event, reverts

ERC721_INTERFACE_ID = "0x80ac58cd"
ERC4907_INTERFACE_ID = "0xad092b5c"


def test_supports_erc721_and_erc4907(rentable_nfts):
    assert rentable_nfts.supportsInterface(ERC721_INTERFACE_ID)
    assert rentable_nfts.supportsInterface(ERC4907_INTERFACE_ID)


def test_set_user_reverts_if_not_owner(rentable_nfts, accounts):
    expiration_date_past = 1660252958
    token_id = rentable_nfts.mint("fakeURI", sender=accounts[0])

    with reverts("caller is not owner nor approved"):
        rentable_nfts.setUser(token_id, accounts[1], expiration_date_past, sender=accounts[1])

    assert rentable_nfts.userOf(token_id) == ZERO_ADDRESS
    assert rentable_nfts.userExpires(token_id) == 0


def test_user_info_for_expired_and_active_rentals(rentable_nfts, clock, accounts):
    expiration_date_past = clock.now() - ONE_HOUR
    expiration_date_future = clock.now() + ONE_HOUR
    expired_token = rentable_nfts.mint("fakeURI", sender=accounts[0])
    active_token = rentable_nfts.mint("fakeURI", sender=accounts[0])

    rentable_nfts.setUser(expired_token, accounts[1], expiration_date_past, sender=accounts[0])
    expired_event = get_last_event(rentable_nfts, "UpdateUser")
    rentable_nfts.setUser(active_token, accounts[2], expiration_date_future, sender=accounts[0])
    active_event = get_last_event(rentable_nfts, "UpdateUser")

    assert rentable_nfts.userOf(expired_token) == ZERO_ADDRESS
    assert rentable_nfts.userExpires(expired_token) == expiration_date_past
    assert expired_event.event == UpdateUser(expired_token, accounts[1], expiration_date_past)

    assert rentable_nfts.userOf(active_token) == accounts[2]
    assert rentable_nfts.userExpires(active_token) == expiration_date_future
    assert active_event.event == UpdateUser(active_token, accounts[2], expiration_date_future)

    rentable_nfts.burn(active_token, sender=accounts[0])

    assert rentable_nfts.userOf(active_token) == ZERO_ADDRESS
    assert rentable_nfts.userExpires(active_token) == 0
    assert get_last_event(rentable_nfts, "UpdateUser").event == UpdateUser(active_token, ZERO_ADDRESS, 0)


def test_rental_expires_naturally(rentable_nfts, clock, accounts):
    owner, renter = accounts[:2]
    token_id = rentable_nfts.mint("fakeURI", sender=owner)
    expires = clock.now() + ONE_DAY
    rentable_nfts.setUser(token_id, renter, expires, sender=owner)

    clock.time_travel(seconds=ONE_DAY - 1)
    assert rentable_nfts.userOf(token_id) == renter

    clock.time_travel(seconds=1)
    assert rentable_nfts.userOf(token_id) == ZERO_ADDRESS
    assert rentable_nfts.userExpires(token_id) == expires


def test_token_of_owner_by_index(rentable_nfts, accounts):
    first = rentable_nfts.mint("fakeURI", sender=accounts[0])
    second = rentable_nfts.mint("fakeURI", sender=accounts[0])

    assert rentable_nfts.tokenOfOwnerByIndex(accounts[0], 0) == first
    assert rentable_nfts.tokenOfOwnerByIndex(accounts[0], 1) == second


def test_mint_increases_balance_and_supply(rentable_nfts, accounts):
    initial_balance = rentable_nfts.balanceOf(accounts[0])
    initial_supply = rentable_nfts.totalSupply()

    token_id = rentable_nfts.mint("https://example.com/token1", sender=accounts[0])

    assert rentable_nfts.tokenExists(token_id)
    assert rentable_nfts.balanceOf(accounts[0]) == initial_balance + 1
    assert rentable_nfts.totalSupply() == initial_supply + 1


def test_owner_overrides_active_renter(rentable_nfts, clock, accounts):
    owner, renter, other_renter = accounts[:3]
    expires = clock.now() + ONE_DAY
    token_id = rentable_nfts.mint("https://example.com/token1", sender=owner)

    rentable_nfts.setUser(token_id, renter, expires, sender=owner)
    assert rentable_nfts.userOf(token_id) == renter

    with reverts("caller is not owner nor approved"):
        rentable_nfts.setUser(token_id, other_renter, expires, sender=other_renter)
    assert rentable_nfts.userOf(token_id) == renter

    rentable_nfts.setUser(token_id, other_renter, expires, sender=owner)
    assert rentable_nfts.userOf(token_id) == other_renter


def test_burn_reverts_if_not_owner(rentable_nfts, accounts):
    owner, non_owner = accounts[:2]
    token_id = rentable_nfts.mint("https://example.com/token1", sender=owner)

    with reverts("Invalid token ID."):
        rentable_nfts.burn(token_id, sender=non_owner)

    assert rentable_nfts.tokenExists(token_id)
    assert rentable_nfts.ownerOf(token_id) == owner


def test_rental_lifecycle(rentable_nfts, clock, accounts):
    owner, operator, renter, buyer = accounts[:4]
    token_id = rentable_nfts.mint("ipfs://token", sender=owner)

    rentable_nfts.setApprovalForAll(operator, True, sender=owner)
    rentable_nfts.setUser(token_id, renter, clock.now() + ONE_HOUR, sender=operator)
    assert rentable_nfts.userOf(token_id) == renter

    clock.time_travel(seconds=2 * ONE_HOUR)
    assert rentable_nfts.userOf(token_id) == ZERO_ADDRESS

    rentable_nfts.setUser(token_id, renter, clock.now() + ONE_HOUR, sender=owner)
    rentable_nfts.transferFrom(owner, buyer, token_id, sender=operator)
    assert rentable_nfts.userOf(token_id) == ZERO_ADDRESS
    assert rentable_nfts.userExpires(token_id) == 0

    with reverts("caller is not owner nor approved"):
        rentable_nfts.setUser(token_id, renter, clock.now() + ONE_HOUR, sender=operator)

    rentable_nfts.burn(token_id, sender=buyer)
    assert not rentable_nfts.tokenExists(token_id)

    update_users = [e.event for e in get_events(rentable_nfts, "UpdateUser")]
    assert update_users[-3:] == [
        UpdateUser(token_id, renter, update_users[-3].expires),
        UpdateUser(token_id, renter, update_users[-2].expires),
        UpdateUser(token_id, ZERO_ADDRESS, 0),
    ]
