import asyncio
from typing import Optional

from cipherdrive.services.folder_service import FolderService
from cipherdrive.utils import get_logger

logger = get_logger(__name__)


class TrashSweeper:
    """
    Background task that permanently removes folders whose time in trash
    exceeds the retention window, independent of explicit delete requests.
    """

    def __init__(self, folder_service: FolderService, interval: int = 3600):
        self.folder_service = folder_service
        self.interval = interval
        self._sweep_task: Optional[asyncio.Task] = None
        self._stop_sweep = False

    async def sweep(self) -> int:
        return await self.folder_service.purge_expired()

    def start(self):
        """Start the periodic sweep on the running event loop"""
        if self._sweep_task is None or self._sweep_task.done():
            self._stop_sweep = False
            self._sweep_task = asyncio.create_task(self._sweep_worker())
            logger.info(f"Trash sweeper started (interval: {self.interval}s)")

    def stop(self):
        self._stop_sweep = True
        if self._sweep_task and not self._sweep_task.done():
            self._sweep_task.cancel()
            logger.info("Trash sweeper stopped")

    async def _sweep_worker(self):
        try:
            while not self._stop_sweep:
                try:
                    await self.sweep()
                except Exception as e:
                    logger.error(f"Error in trash sweeper: {str(e)}")
                await asyncio.sleep(self.interval)
        except asyncio.CancelledError:
            pass


_trash_sweeper: Optional[TrashSweeper] = None


def init_trash_sweeper(interval: int = 3600) -> TrashSweeper:
    global _trash_sweeper
    if _trash_sweeper is None:
        _trash_sweeper = TrashSweeper(FolderService(), interval=interval)
        _trash_sweeper.start()
    return _trash_sweeper


def shutdown_trash_sweeper() -> None:
    global _trash_sweeper
    if _trash_sweeper:
        _trash_sweeper.stop()
        _trash_sweeper = None
