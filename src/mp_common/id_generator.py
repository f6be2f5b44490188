"""Order identifiers.

Two different ids per order:

  order id      snowflake-style decimal string, internal primary key.
                Time-ordered, so ORDER BY id DESC is newest-first.
  order number  random UUID4 string handed to the customer. Carries no
                ordering or volume information.

Order id bit layout (63 bits used):

    | 41 bits ms since 2024-01-01 UTC | 10 bits node | 12 bits sequence |

Node comes from ORDER_ID_NODE and must differ between instances writing
to the same database.
"""

import threading
import time
import uuid

from config.settings import settings

_EPOCH_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z
_NODE_BITS = 10
_SEQ_BITS = 12
_MAX_NODE = (1 << _NODE_BITS) - 1
_SEQ_MASK = (1 << _SEQ_BITS) - 1


class OrderIdGenerator:
    def __init__(self, node: int = 0) -> None:
        if not 0 <= node <= _MAX_NODE:
            raise ValueError(f"node must be within 0..{_MAX_NODE}, got {node}")
        self._node = node
        self._lock = threading.Lock()
        self._last_ms = 0
        self._seq = 0

    def next_id(self) -> str:
        with self._lock:
            now = max(self._now_ms(), self._last_ms)  # never step backwards with the clock
            if now == self._last_ms:
                self._seq = (self._seq + 1) & _SEQ_MASK
                if self._seq == 0:
                    # 4096 ids in this millisecond already
                    while now <= self._last_ms:
                        now = self._now_ms()
            else:
                self._seq = 0
            self._last_ms = now
            return str(
                ((now - _EPOCH_MS) << (_NODE_BITS + _SEQ_BITS))
                | (self._node << _SEQ_BITS)
                | self._seq
            )

    @staticmethod
    def _now_ms() -> int:
        return time.time_ns() // 1_000_000


_generator = OrderIdGenerator(settings.ORDER_ID_NODE)


def generate_id() -> str:
    """Next order id from the process-wide generator."""
    return _generator.next_id()


def generate_order_number() -> str:
    return str(uuid.uuid4())
