"""Background execution helpers for front-ends that must not block."""

from cbztools.automation.worker import MergeWorker

__all__ = ["MergeWorker"]
