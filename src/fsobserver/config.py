"""Configuration for the fsobserver package."""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from .models import NotifyFilters
from .scanner import matches_extension


MIN_BUFFER_SIZE = 4096
DEFAULT_BUFFER_SIZE = 8192


def normalize_extensions(extensions) -> FrozenSet[str]:
    """
    Normalize file extensions for case-insensitive matching.
    
    Blank entries are dropped, the rest are lower-cased and
    given a leading dot if they lack one.
    """
    normalized = set()
    for ext in extensions or ():
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        normalized.add(ext)
    return frozenset(normalized)


@dataclass
class ObserverConfig:
    """
    Configuration options for a filesystem observer.
    
    Attributes:
        path: Directory to observe
        filter: Glob name filter forwarded to the native source
        file_extensions: Extensions files must have to be enumerated (empty for all)
        include_subdirectories: Whether to watch and index below the root
        raise_subdirectory_events: Whether to synthesize events for descendants
        internal_buffer_size: Native buffer size hint in bytes
        notify_filter: Which kinds of change the native source reports
    """
    path: Optional[str] = None
    filter: str = "*"
    file_extensions: List[str] = field(default_factory=list)
    include_subdirectories: bool = False
    raise_subdirectory_events: bool = True
    internal_buffer_size: int = DEFAULT_BUFFER_SIZE
    notify_filter: NotifyFilters = field(default_factory=NotifyFilters.default)

    def __post_init__(self):
        if self.internal_buffer_size < MIN_BUFFER_SIZE:
            self.internal_buffer_size = MIN_BUFFER_SIZE

    def normalized_extensions(self) -> FrozenSet[str]:
        return normalize_extensions(self.file_extensions)

    def matches_extension(self, path: str) -> bool:
        """
        Check if a file path passes the extension filter.
        
        Args:
            path: File path to check
            
        Returns:
            True if no extensions are configured or the path's
            extension matches one of them, ignoring case
        """
        return matches_extension(path, self.normalized_extensions())
