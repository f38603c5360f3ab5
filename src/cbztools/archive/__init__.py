"""Comic archive discovery, descriptors and merging."""

from .config import MergeSettings
from .errors import ArchiveError, ArchiveIOError, DescriptorError, DiscoveryError, NothingToMergeError
from .events import MergeEvent, MergeListener, MergeStage
from .merger import ArchiveMerger, merge_archives
from .models import ComicInfo, MergeResult

__all__ = [
    "ArchiveError",
    "ArchiveIOError",
    "ArchiveMerger",
    "ComicInfo",
    "DescriptorError",
    "DiscoveryError",
    "MergeEvent",
    "MergeListener",
    "MergeResult",
    "MergeSettings",
    "MergeStage",
    "NothingToMergeError",
    "merge_archives",
]
