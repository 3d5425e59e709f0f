"""
Audit Counters

Externally owned counters a read updates as a side effect:
- records processed: every record pulled from the deserialised stream
- records returned: every record released to the output

NOT_COUNTED (-1) marks a read that bypassed rule application, which is
different from a read that legitimately counted zero records. A counter
holding NOT_COUNTED refuses further increments.
"""

import threading

NOT_COUNTED = -1


class AuditCounter:
    """
    Thread-safe integer counter.

    Normally one pair of counters is scoped to one request by the caller.
    """

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    def increment(self, delta: int = 1) -> int:
        with self._lock:
            if self._value == NOT_COUNTED:
                raise ValueError("Counter is marked as not counted")
            self._value += delta
            return self._value

    def set(self, value: int) -> None:
        with self._lock:
            self._value = value

    def mark_not_counted(self) -> None:
        self.set(NOT_COUNTED)

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    @property
    def counted(self) -> bool:
        return self.value != NOT_COUNTED

    def __repr__(self) -> str:
        return f"AuditCounter({self.value})"
