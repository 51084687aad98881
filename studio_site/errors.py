"""Exception types shared by the client, builders and pack mounter."""
from pathlib import Path
from typing import Any, Dict, Optional


class StudioSiteError(Exception):
    """Base class for application errors."""


class EndpointResolutionError(StudioSiteError):
    """No endpoint candidate produced a usable FitDegree payload."""

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.detail = detail or {}


class UpstreamEnvelopeError(StudioSiteError):
    """A FitDegree collection envelope did not report success."""


class BuildError(StudioSiteError):
    """A builder precondition failed."""


class PlaceholderNotFoundError(BuildError):
    """The placeholder token is missing from the target file."""

    def __init__(self, token: str, path: Path):
        super().__init__(
            f"Placeholder not found in {path}. Add this token where the "
            f"generated markup belongs:\n{token}\n\n(If a built version was "
            f"committed, restore the placeholder from version control.)"
        )
        self.token = token
        self.path = path


class PackContractError(StudioSiteError):
    """A pack entry module does not expose a valid contract."""
