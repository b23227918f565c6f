import time


class SystemClock:
    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock driven by the caller, like the block timestamp of a local chain."""

    def __init__(self, timestamp: int | None = None):
        self.timestamp = int(time.time()) if timestamp is None else timestamp

    def now(self) -> int:
        return self.timestamp

    def time_travel(self, seconds: int = 0, timestamp: int | None = None):
        if timestamp is not None:
            if timestamp < self.timestamp:
                raise ValueError(f"cannot travel back in time to {timestamp}, now is {self.timestamp}")
            self.timestamp = timestamp
        else:
            if seconds < 0:
                raise ValueError(f"cannot travel back in time {seconds=}")
            self.timestamp += seconds
