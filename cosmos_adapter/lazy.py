"""Once-initialized async value holder."""

import asyncio
from typing import Awaitable, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class AsyncLazy(Generic[T]):
    """Builds its value on first ``get()``; concurrent first calls share one build.

    A failed build leaves the holder empty so the next ``get()`` retries.
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory
        self._value: Optional[T] = None
        self._initialized = False
        # Created on first use so it binds to the loop that awaits it
        self._lock: Optional[asyncio.Lock] = None

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def get(self) -> T:
        if self._initialized:
            return self._value  # type: ignore[return-value]
        async with self._get_lock():
            if not self._initialized:
                self._value = await self._factory()
                self._initialized = True
        return self._value  # type: ignore[return-value]

    def peek(self) -> Optional[T]:
        """Current value without triggering initialization."""
        return self._value if self._initialized else None

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def reset(self) -> Optional[T]:
        """Forget the cached value and return it so the caller can release it.

        Waits for a build already in progress, so a value created
        concurrently is handed back here instead of being left behind.
        """
        async with self._get_lock():
            value = self.peek()
            self._value = None
            self._initialized = False
        return value
