import pytest
from eth_account import Account

from rentable_nfts import LedgerConfig, ManualClock, RentableNFTs

START_TIME = 1700000000


@pytest.fixture(scope="session")
def accounts():
    return [Account.create().address for _ in range(10)]


@pytest.fixture(scope="session")
def owner():
    return Account.create().address


@pytest.fixture(scope="session")
def renter():
    return Account.create().address


@pytest.fixture(scope="session")
def operator():
    return Account.create().address


@pytest.fixture(scope="session")
def random_guy():
    return Account.create().address


@pytest.fixture
def clock():
    return ManualClock(START_TIME)


@pytest.fixture
def config():
    return LedgerConfig()


@pytest.fixture
def contract(config, clock):
    return RentableNFTs(config, clock)


@pytest.fixture
def exclusive_contract(clock):
    return RentableNFTs(LedgerConfig(allow_owner_override_of_active_renter=False), clock)


@pytest.fixture
def token_id(contract, owner):
    return contract.mint("fakeURI", sender=owner)
