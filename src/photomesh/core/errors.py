"""Error taxonomy for a photogrammetry session.

Every error knows the HTTP status it maps to and the user-facing message;
``details`` carries opaque diagnostic text (never parsed).
"""

from __future__ import annotations


class PhotomeshError(Exception):
    """Base class for request-level failures."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: str | None = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message if details is None else f"{self.message}: {details}")


class ValidationError(PhotomeshError):
    """Request precondition violated (e.g. too few photos)."""

    status_code = 400
    message = "At least 3 photos required for photogrammetry"


class FilesystemError(PhotomeshError):
    """Workspace creation or file I/O failed."""

    message = "Workspace I/O failed"


class PipelineExecutionError(PhotomeshError):
    """The reconstruction tool crashed or exited non-zero."""

    message = "Photogrammetry processing failed"


class PipelineTimeoutError(PipelineExecutionError):
    """The reconstruction tool exceeded its wall-clock budget and was killed."""


class CaptureOverflowError(PipelineExecutionError):
    """The reconstruction tool wrote more diagnostics than the capture bound."""


class NoOutputError(PhotomeshError):
    """The tool exited successfully but the mandatory mesh is missing."""

    message = "No mesh generated - check photo quality and overlap"


class ConversionError(PhotomeshError):
    """Mesh format conversion failed. Recovered locally, never sent to clients."""

    message = "Mesh conversion failed"


class GraphReferenceError(PhotomeshError):
    """A job-graph stage referenced an unknown stage or attribute."""

    message = "Invalid pipeline graph reference"
