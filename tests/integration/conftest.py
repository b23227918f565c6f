import time

import pytest

from rentable_nfts import LedgerConfig, ManualClock, RentableNFTs


@pytest.fixture(scope="module")
def clock():
    return ManualClock(int(time.time()))


@pytest.fixture(scope="module")
def rentable_nfts(clock):
    return RentableNFTs(LedgerConfig(), clock)


@pytest.fixture(autouse=True)
def isolate(rentable_nfts):
    with rentable_nfts.anchor():
        yield
