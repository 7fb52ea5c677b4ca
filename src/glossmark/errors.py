"""Exception taxonomy for document and annotation operations.

Two families matter to callers:

- ``ValidationFailure``: the request itself is unusable (collapsed range,
  blank tooltip text). Raised before any mutation, so the tree is unchanged.
- ``NotFound``: the request names something that isn't in the tree (unknown
  marker id, unresolvable structural path). Callers pick the fallback.

Structural drift (a path resolving to a different node because siblings moved
between capture and restore) is not detected and has no exception.
"""

from __future__ import annotations


class GlossmarkError(Exception):
    """Base class for all glossmark errors."""


class ValidationFailure(GlossmarkError, ValueError):
    """Operation rejected before mutation because its input is invalid."""


class InvalidRangeError(ValidationFailure):
    """Range is collapsed or has an endpoint outside the document root."""


class EmptyTooltipTextError(ValidationFailure):
    """Tooltip text is empty after trimming."""


class EmptyLinkUrlError(ValidationFailure):
    """Link URL is empty after trimming."""


class NotFound(GlossmarkError, LookupError):
    """Referenced entity is not present in the document."""


class MarkerNotFoundError(NotFound):
    """No marker with the given identifier exists in the document."""

    def __init__(self, marker_id: str) -> None:
        self.marker_id = marker_id
        super().__init__(f"No tooltip marker with id {marker_id!r}")


class PathNotFoundError(NotFound):
    """Structural path does not resolve against the current tree."""

    def __init__(self, path: tuple[int, ...]) -> None:
        self.path = path
        super().__init__(f"Structural path {list(path)} does not resolve")


class InteractionStateError(GlossmarkError, RuntimeError):
    """Interaction token used out of order (e.g. completed twice)."""
