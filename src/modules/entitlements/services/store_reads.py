import asyncio
import functools
from typing import Any, Callable

from src.core.config import settings


class TimedStoreReads:
    """
    Runs blocking repository calls in the default executor, each under its own
    timeout. A timeout surfaces as ``asyncio.TimeoutError``.
    """

    def __init__(self, store_timeout: float = None):
        self.store_timeout = (
            store_timeout if store_timeout is not None else settings.entitlements.store_timeout_seconds
        )

    async def _read(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(
            loop.run_in_executor(None, functools.partial(func, *args, **kwargs)),
            timeout=self.store_timeout,
        )
