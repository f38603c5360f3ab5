"""Progress events emitted by the merge pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable


class MergeStage(str, Enum):
    DISCOVERED = "discovered"
    ORDERED = "ordered"
    DESCRIPTOR_READ = "descriptor_read"
    OUTPUT_CREATED = "output_created"
    SOURCE_STARTED = "source_started"
    DESCRIPTOR_WRITTEN = "descriptor_written"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class MergeEvent:
    """One coarse progress notification; ``progress`` is in ``[0, 1]``."""

    stage: MergeStage
    progress: float
    message: str
    path: Path | None = None
    detail: str | None = None


MergeListener = Callable[[MergeEvent], None]


def source_progress(index: int, total: int) -> float:
    """Progress for the *index*-th (0-based) of *total* sources, spread over 0.5-0.9."""

    if total <= 0:
        return 0.5
    return 0.5 + (index / total) * 0.4
