from typing import Protocol


class IdGeneratorPort(Protocol):
    def new_id(self) -> str:
        """Return a fresh, collision-resistant identifier."""
        ...
