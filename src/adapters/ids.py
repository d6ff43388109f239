from itertools import count
from uuid import uuid4


class UuidIdGenerator:
    def new_id(self) -> str:
        return str(uuid4())


class SequentialIdGenerator:
    """Deterministic ids (``blk-1``, ``blk-2``...) for tests and fixtures."""

    def __init__(self, prefix: str = "blk", start: int = 1) -> None:
        self._prefix = prefix
        self._counter = count(start)

    def new_id(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"
