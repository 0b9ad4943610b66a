from __future__ import annotations


class BetterSearchError(RuntimeError):
    """Base class for failures inside the search augmentation layer."""

    label = "augmenting search results"


class PatchInstallationError(BetterSearchError):
    """Raised when a host extension point cannot be wrapped."""

    label = "patching search internals"


class AugmentationError(BetterSearchError):
    """Raised when a single result item cannot be augmented."""

    label = "rendering a search result"


class HostShapeError(AugmentationError):
    """Raised when a host object does not have the expected attributes."""


class DisposalError(BetterSearchError):
    """Raised when one or more disposers of a result set fail."""

    label = "cleaning up search results"

    def __init__(self, message: str, failures: list[BaseException] | None = None) -> None:
        super().__init__(message)
        self.failures: list[BaseException] = list(failures or [])


def error_label(error: BaseException) -> str:
    if isinstance(error, BetterSearchError):
        return error.label
    return BetterSearchError.label
