import logging
from collections import namedtuple
from typing import Callable

from eth_abi import decode, encode
from eth_utils import keccak, to_checksum_address
from hexbytes import HexBytes

logger = logging.getLogger(__name__)

UpdateUser = namedtuple("UpdateUser", ["tokenId", "user", "expires"])
Transfer = namedtuple("Transfer", ["sender", "receiver", "tokenId"])
Approval = namedtuple("Approval", ["owner", "approved", "tokenId"])
ApprovalForAll = namedtuple("ApprovalForAll", ["owner", "operator", "approved"])

EventAbi = namedtuple("EventAbi", ["signature", "types", "indexed"])

EVENT_ABIS = {
    UpdateUser: EventAbi("UpdateUser(uint256,address,uint64)", ("uint256", "address", "uint64"), (True, True, False)),
    Transfer: EventAbi("Transfer(address,address,uint256)", ("address", "address", "uint256"), (True, True, True)),
    Approval: EventAbi("Approval(address,address,uint256)", ("address", "address", "uint256"), (True, True, True)),
    ApprovalForAll: EventAbi("ApprovalForAll(address,address,bool)", ("address", "address", "bool"), (True, True, False)),
}

LogEntry = namedtuple("LogEntry", ["topics", "data"])


def event_topic(event_type) -> HexBytes:
    return HexBytes(keccak(text=EVENT_ABIS[event_type].signature))


def encode_log(event) -> LogEntry:
    abi = EVENT_ABIS[type(event)]
    topics = [event_topic(type(event))]
    topics += [HexBytes(encode([t], [v])) for t, v, i in zip(abi.types, event, abi.indexed) if i]
    data_types = [t for t, i in zip(abi.types, abi.indexed) if not i]
    data_values = [v for v, i in zip(event, abi.indexed) if not i]
    return LogEntry(topics, HexBytes(encode(data_types, data_values)))


def decode_log(entry: LogEntry):
    event_type = next((e for e in EVENT_ABIS if event_topic(e) == HexBytes(entry.topics[0])), None)
    if event_type is None:
        raise ValueError(f"unknown event topic {HexBytes(entry.topics[0]).hex()}")

    abi = EVENT_ABIS[event_type]
    indexed_types = [t for t, i in zip(abi.types, abi.indexed) if i]
    data_types = [t for t, i in zip(abi.types, abi.indexed) if not i]
    indexed_values = iter([decode([t], bytes(topic))[0] for t, topic in zip(indexed_types, entry.topics[1:])])
    data_values = iter(decode(data_types, bytes(entry.data)))

    values = []
    for t, i in zip(abi.types, abi.indexed):
        value = next(indexed_values) if i else next(data_values)
        values.append(to_checksum_address(value) if t == "address" else value)
    return event_type(*values)


class EventLog:
    def __init__(self):
        self.events = []
        self.subscribers: list[Callable] = []

    def subscribe(self, handler: Callable):
        self.subscribers.append(handler)
        return lambda: self.subscribers.remove(handler)

    def publish(self, events: list):
        for event in events:
            logger.debug("event %s %s", type(event).__name__, event._asdict())
            self.events.append(event)
        for event in events:
            for handler in list(self.subscribers):
                handler(event)

    def get_logs(self, name: str | None = None) -> list:
        return [e for e in self.events if name is None or type(e).__name__ == name]

    def __len__(self):
        return len(self.events)
