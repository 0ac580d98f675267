"""
The computer "thinking" step as an explicit asynchronous unit of work.

A turn waits for the cosmetic delay, then runs the move selection in a worker thread (the search is CPU bound and must
not block the event loop). Starting a new game cancels the turn: whatever it would have produced is discarded.
"""

import asyncio
from typing import Callable, Generic, Optional, TypeVar

from loguru import logger

M = TypeVar("M")


class OpponentTurn(Generic[M]):
    def __init__(self, choose_move: Callable[[], Optional[M]], delay_seconds: float) -> None:
        self._choose_move = choose_move
        self._delay_seconds = delay_seconds
        self._task: Optional[asyncio.Task[Optional[M]]] = None

    def start(self) -> "OpponentTurn[M]":
        """Schedule the turn on the running event loop"""
        self._task = asyncio.create_task(self._run())
        return self

    async def _run(self) -> Optional[M]:
        await asyncio.sleep(self._delay_seconds)
        return await asyncio.to_thread(self._choose_move)

    async def result(self) -> Optional[M]:
        """The move chosen (None when there was nothing to play). Raises CancelledError if the turn was cancelled."""
        if self._task is None:
            self.start()
        return await self._task

    def cancel(self) -> bool:
        if self._task is None or self._task.done():
            return False
        logger.debug("services.opponent.cancel")
        return self._task.cancel()
