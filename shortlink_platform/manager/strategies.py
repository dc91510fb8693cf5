"""
Strategies for short-link generation in shortlink_platform.

Provided strategies:
- ProcessIDStrategy: Deterministic BLAKE3-256(process id bytes) -> Base64 -> first 8 chars
- RandomStrategy: First 8 chars of a random UUID4

Selection:
- `derive_short_link` scans the path segments after the domain. The first
  segment that is exactly 64 hex characters is decoded and fed to
  ProcessIDStrategy; when no segment qualifies, RandomStrategy is used.

Collision notes (ProcessIDStrategy):
- Truncating the Base64 digest to 8 chars keeps links short at the price of a
  small collision chance: ~0.0018% across 100,000 ids, ~0.177% across 1,000,000.
- Identical process ids always map to the same short link.
"""

import base64
import binascii
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from blake3 import blake3

from ..config import SHORT_LINK_LENGTH

PROCESS_ID_HEX_LENGTH = 64


class BaseStrategy(ABC):
    """Abstract base for short-link generation strategies."""
    name: str = "base"

    @abstractmethod
    def generate(self, payload: Optional[bytes] = None) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class ProcessIDStrategy(BaseStrategy):
    """Content-derived strategy keyed on a decoded process identifier."""
    name = "processID"

    def generate(self, payload: Optional[bytes] = None) -> str:
        if payload is None:
            raise ValueError("ProcessIDStrategy requires a process id payload")
        digest = blake3(payload).digest()
        return base64.b64encode(digest).decode("ascii")[:SHORT_LINK_LENGTH]


@dataclass(frozen=True)
class RandomStrategy(BaseStrategy):
    """Random strategy; repeated calls with the same URL yield different links."""
    name = "uuid"

    def generate(self, payload: Optional[bytes] = None) -> str:
        return str(uuid.uuid4())[:SHORT_LINK_LENGTH]


def find_process_id(segments: Iterable[str]) -> Optional[bytes]:
    """
    Return the decoded bytes of the first 64-char hex segment, or None.

    Upper- and lower-case hex digits are accepted; anything else (including
    whitespace) disqualifies the segment.
    """
    for segment in segments:
        if len(segment) != PROCESS_ID_HEX_LENGTH:
            continue
        try:
            return binascii.unhexlify(segment)
        except ValueError:
            # binascii.Error for bad digits, ValueError for non-ASCII input
            continue
    return None


def derive_short_link(segments: Iterable[str]) -> Tuple[str, str]:
    """
    Pick a strategy for the given path segments and generate the short link.

    Returns:
        (short_link, strategy_name)
    """
    process_id = find_process_id(segments)
    if process_id is not None:
        strategy: BaseStrategy = ProcessIDStrategy()
        return strategy.generate(process_id), strategy.name
    strategy = RandomStrategy()
    return strategy.generate(), strategy.name
