"""Decoding of on-chain swap logs from V2 pairs and V3 pools into buy/sell events."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from Crypto.Hash import keccak

_WORD = 32
_ZERO_HASH = bytes(_WORD)

V2_SWAP_SIGNATURE = "Swap(address,uint256,uint256,uint256,uint256,address)"
V3_SWAP_SIGNATURE = "Swap(address,address,int256,int256,uint160,uint128,int24)"


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest of ``data``."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def v2_swap_topic() -> bytes:
    """Topic0 of the V2 ``Swap`` event."""
    return keccak256(V2_SWAP_SIGNATURE.encode())


def v3_swap_topic() -> bytes:
    """Topic0 of the V3 ``Swap`` event."""
    return keccak256(V3_SWAP_SIGNATURE.encode())


@dataclass(frozen=True)
class RawLog:
    """An event log as delivered by a node subscription."""

    address: str
    topics: list[bytes] = field(default_factory=list)
    data: bytes = b""
    transaction_hash: bytes | None = None


@dataclass(frozen=True)
class SwapEvent:
    """A single buy or sell of the base token on a pair."""

    pair: str
    trader: str
    is_buy: bool
    amount_in: int
    amount_out: int
    timestamp: int
    tx_hash: bytes


@dataclass
class SwapStats:
    """Aggregated swap information for a pair."""

    buy_count: int = 0
    sell_count: int = 0
    unique_buyers: int = 0
    last_buyer: str | None = None


def _address_from_word(word: bytes) -> str:
    return "0x" + bytes(word[12:_WORD]).hex()


def _words(data: bytes, count: int) -> list[bytes]:
    return [data[i * _WORD : (i + 1) * _WORD] for i in range(count)]


def _event(log: RawLog, trader: str, is_buy: bool, amount_in: int, amount_out: int) -> SwapEvent:
    return SwapEvent(
        pair=log.address.lower(),
        trader=trader,
        is_buy=is_buy,
        amount_in=amount_in,
        amount_out=amount_out,
        timestamp=int(time.time()),
        tx_hash=log.transaction_hash if log.transaction_hash is not None else _ZERO_HASH,
    )


def parse_v2_swap(log: RawLog, is_token0: bool) -> SwapEvent | None:
    """Decode a V2 swap log; ``is_token0`` tells whether the base token is token0."""
    if len(log.topics) < 3 or len(log.data) < 4 * _WORD:
        return None
    trader = _address_from_word(log.topics[2])
    amount0_in, amount1_in, amount0_out, amount1_out = (
        int.from_bytes(w, "big") for w in _words(log.data, 4)
    )
    if is_token0:
        if amount0_out > 0:
            return _event(log, trader, True, amount1_in, amount0_out)
        return _event(log, trader, False, amount0_in, amount1_out)
    if amount1_out > 0:
        return _event(log, trader, True, amount0_in, amount1_out)
    return _event(log, trader, False, amount1_in, amount0_out)


def parse_v3_swap(log: RawLog, is_token0: bool) -> SwapEvent | None:
    """Decode a V3 swap log; a negative signed amount means that token left the pool."""
    if len(log.topics) < 3 or len(log.data) < 5 * _WORD:
        return None
    trader = _address_from_word(log.topics[2])
    raw0, raw1 = _words(log.data, 2)
    amount0 = int.from_bytes(raw0, "big")
    amount1 = int.from_bytes(raw1, "big")
    amount0_negative = bool(raw0[0] & 0x80)
    amount1_negative = bool(raw1[0] & 0x80)
    if is_token0:
        if amount0_negative:
            return _event(log, trader, True, amount1, amount0)
        return _event(log, trader, False, amount0, amount1)
    if amount1_negative:
        return _event(log, trader, True, amount0, amount1)
    return _event(log, trader, False, amount1, amount0)