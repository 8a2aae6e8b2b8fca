"""End-to-end OOO sync runs shared by the CLI and the function app."""

from ooosync.sync.event import SyncEvent, load_default_sync_event
from ooosync.sync.runner import RunReport, run

__all__ = ["RunReport", "SyncEvent", "load_default_sync_event", "run"]
