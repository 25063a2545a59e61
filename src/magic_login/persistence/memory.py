"""
In-process async store (variant A).
"""

import asyncio
from typing import Optional


class MemoryEmailStore:
    """Async key-value store held in memory.

    ``delay`` adds latency to every call, which is how tests exercise a slow
    write followed by a clear.
    """

    def __init__(self, email: Optional[str] = None, delay: float = 0.0):
        self._email = email
        self._delay = delay
        self.operations: list[tuple[str, Optional[str]]] = []

    @property
    def email(self) -> Optional[str]:
        return self._email

    async def _settle(self) -> None:
        if self._delay:
            await asyncio.sleep(self._delay)

    async def write(self, email: str) -> None:
        await self._settle()
        self._email = email
        self.operations.append(("write", email))

    async def read(self) -> Optional[str]:
        await self._settle()
        self.operations.append(("read", self._email))
        return self._email

    async def clear(self) -> None:
        await self._settle()
        self._email = None
        self.operations.append(("clear", None))
