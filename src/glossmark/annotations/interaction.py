"""Dialog-driven tooltip and link interactions.

A dialog interrupts the editing flow: it takes focus (and the selection with
it) and resolves at some later point. Each interaction is therefore split in
two calls around the dialog:

1. ``begin_*`` captures the selection and returns a ``PendingInteraction``
   carrying the initial dialog field values.
2. ``complete_interaction`` takes that token and the dialog's result,
   restores the selection, and applies the change.

``run_tooltip_dialog`` / ``run_link_dialog`` await a ``DialogSurface`` in
between for callers that want a single coroutine.

Usage:
    pending = begin_tooltip_interaction(editor)
    result = await dialog.ask(pending.initial_fields)
    outcome = complete_interaction(editor, pending, result)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol
from uuid import uuid4

from pydantic import BaseModel, TypeAdapter, ValidationError

from glossmark.annotations.links import create_link
from glossmark.annotations.markers import marker_icon, marker_text
from glossmark.config import get_settings
from glossmark.errors import (
    InteractionStateError,
    InvalidRangeError,
    MarkerNotFoundError,
    ValidationFailure,
)

if TYPE_CHECKING:
    from glossmark.annotations.overlay import OverlayManager
    from glossmark.document.tree import ElementNode
    from glossmark.selection.bridge import SelectionBridge
    from glossmark.selection.state import Selection

logger = logging.getLogger(__name__)


class InteractionHost(Protocol):
    """What an interaction needs from the host document."""

    root: ElementNode
    selection: Selection
    bridge: SelectionBridge
    overlay: OverlayManager


class InteractionKind(StrEnum):
    TOOLTIP = "tooltip"
    LINK = "link"


class Outcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    CANCELLED = "cancelled"
    INVALID = "invalid"
    NOT_FOUND = "not_found"


_BOOL = TypeAdapter(bool)


class DialogResult(BaseModel):
    """What a dialog yields when it closes."""

    confirmed: bool
    fields: dict[str, Any] = {}

    def text_field(self, name: str) -> str:
        """Field value as a trimmed string ('' when missing)."""
        value = self.fields.get(name)
        return "" if value is None else str(value).strip()

    def flag_field(self, name: str, default: bool) -> bool:
        """Field value coerced to bool with pydantic's rules ('false' is False).

        Raises:
            ValidationError: If the value isn't recognisably true or false.
        """
        value = self.fields.get(name)
        if value is None or value == "":
            return default
        return _BOOL.validate_python(value)


class DialogSurface(Protocol):
    """An opaque dialog: shows initial values, later yields a result."""

    async def ask(self, initial_fields: dict[str, Any]) -> DialogResult: ...


@dataclass
class PendingInteraction:
    """Token for an open dialog, handed back on completion."""

    kind: InteractionKind
    initial_fields: dict[str, Any]
    marker_id: str | None = None
    token: str = field(default_factory=lambda: str(uuid4()))
    completed: bool = False

    @property
    def is_edit(self) -> bool:
        return self.marker_id is not None


@dataclass(frozen=True)
class InteractionOutcome:
    status: Outcome
    element: ElementNode | None = None
    message: str = ""


# ---------------------------------------------------------------------------
# Phase 1: begin
# ---------------------------------------------------------------------------


def begin_tooltip_interaction(
    host: InteractionHost, marker_id: str | None = None
) -> PendingInteraction:
    """Prepare the tooltip dialog for a new marker or for editing one.

    New markers capture the selection; edits leave it alone because they
    don't need it.

    Raises:
        MarkerNotFoundError: If ``marker_id`` is given but not in the document.
    """
    if marker_id is not None:
        marker = host.overlay.find(marker_id)
        if marker is None:
            raise MarkerNotFoundError(marker_id)
        return PendingInteraction(
            kind=InteractionKind.TOOLTIP,
            initial_fields={
                "text": marker_text(marker),
                "icon": marker_icon(marker) or "",
            },
            marker_id=marker_id,
        )

    host.bridge.capture()
    return PendingInteraction(
        kind=InteractionKind.TOOLTIP,
        initial_fields={"text": "", "icon": ""},
    )


def begin_link_interaction(host: InteractionHost) -> PendingInteraction:
    """Prepare the link dialog for the current selection.

    Raises:
        InvalidRangeError: If nothing is selected or the selection is
            collapsed or outside the document.
    """
    rng = host.selection.get_range(host.root)
    if rng is None or rng.collapsed:
        msg = "select the text to turn into a link"
        raise InvalidRangeError(msg)

    if host.bridge.capture() is None:
        msg = "selection must be inside the document"
        raise InvalidRangeError(msg)
    return PendingInteraction(
        kind=InteractionKind.LINK,
        initial_fields={
            "url": "",
            "new_tab": get_settings().link.open_in_new_tab,
        },
    )


# ---------------------------------------------------------------------------
# Phase 2: complete
# ---------------------------------------------------------------------------


def complete_interaction(
    host: InteractionHost, pending: PendingInteraction, result: DialogResult
) -> InteractionOutcome:
    """Apply a closed dialog's result.

    Cancelled and invalid results still restore the selection so the caret
    goes back where it was; they never mutate the tree.

    Raises:
        InteractionStateError: If ``pending`` was already completed.
    """
    if pending.completed:
        msg = f"interaction {pending.token} already completed"
        raise InteractionStateError(msg)
    pending.completed = True

    if not result.confirmed:
        host.bridge.restore()
        logger.info("%s dialog cancelled", pending.kind.value.capitalize())
        return InteractionOutcome(Outcome.CANCELLED)

    if pending.kind is InteractionKind.LINK:
        return _complete_link(host, result)
    return _complete_tooltip(host, pending, result)


def _complete_tooltip(
    host: InteractionHost, pending: PendingInteraction, result: DialogResult
) -> InteractionOutcome:
    text = result.text_field("text")
    icon = result.text_field("icon")

    if not text:
        host.bridge.restore()
        logger.warning("Tooltip dialog confirmed without text")
        return InteractionOutcome(Outcome.INVALID, message="Tooltip text is required.")

    if pending.marker_id is not None:
        try:
            marker = host.overlay.edit(pending.marker_id, text, icon)
        except MarkerNotFoundError as exc:
            logger.warning("%s", exc)
            return InteractionOutcome(Outcome.NOT_FOUND, message=str(exc))
        return InteractionOutcome(Outcome.UPDATED, marker)

    host.bridge.restore()
    try:
        marker = host.overlay.wrap_selection(text, icon)
    except ValidationFailure as exc:
        logger.warning("Could not add tooltip: %s", exc)
        return InteractionOutcome(Outcome.INVALID, message=str(exc))
    return InteractionOutcome(Outcome.CREATED, marker)


def _complete_link(host: InteractionHost, result: DialogResult) -> InteractionOutcome:
    url = result.text_field("url")
    if not url:
        host.bridge.restore()
        logger.warning("Link dialog confirmed without URL")
        return InteractionOutcome(Outcome.INVALID, message="A URL is required.")

    host.bridge.restore()
    try:
        new_tab = result.flag_field("new_tab", get_settings().link.open_in_new_tab)
        # The live selection may point at nodes removed while the dialog was up.
        rng = host.selection.get_range(host.root)
        if rng is None:
            msg = "selection was lost"
            raise InvalidRangeError(msg)
        anchor = create_link(host, rng, url, open_in_new_tab=new_tab)
    except (ValidationFailure, ValidationError) as exc:
        logger.warning("Could not add link: %s", exc)
        return InteractionOutcome(Outcome.INVALID, message=str(exc))
    return InteractionOutcome(Outcome.CREATED, anchor)


# ---------------------------------------------------------------------------
# Async drivers
# ---------------------------------------------------------------------------


async def run_tooltip_dialog(
    host: InteractionHost, dialog: DialogSurface, marker_id: str | None = None
) -> InteractionOutcome:
    """Open the tooltip dialog, wait for it, and apply the result."""
    pending = begin_tooltip_interaction(host, marker_id)
    result = await dialog.ask(dict(pending.initial_fields))
    return complete_interaction(host, pending, result)


async def run_link_dialog(
    host: InteractionHost, dialog: DialogSurface
) -> InteractionOutcome:
    """Open the link dialog, wait for it, and apply the result."""
    pending = begin_link_interaction(host)
    result = await dialog.ask(dict(pending.initial_fields))
    return complete_interaction(host, pending, result)
