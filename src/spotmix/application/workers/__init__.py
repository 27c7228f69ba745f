"""Background workers."""

from spotmix.application.workers.auto_update_worker import AutoUpdateWorker

__all__ = ["AutoUpdateWorker"]
