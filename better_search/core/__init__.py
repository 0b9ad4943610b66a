from .disposer_registry import DisposerRegistry
from .errors import (
    AugmentationError,
    BetterSearchError,
    DisposalError,
    HostShapeError,
    PatchInstallationError,
)
from .idempotency import AugmentationTracker, ExtensionPoint, IdentityWeakSet, PatchGuard
from .monkey import around

__all__ = [
    "AugmentationError",
    "AugmentationTracker",
    "BetterSearchError",
    "DisposalError",
    "DisposerRegistry",
    "ExtensionPoint",
    "HostShapeError",
    "IdentityWeakSet",
    "PatchGuard",
    "PatchInstallationError",
    "around",
]
