"""Tooltip markers, links, and the dialog interactions that create them."""

from glossmark.annotations.interaction import (
    DialogResult,
    DialogSurface,
    InteractionOutcome,
    Outcome,
    PendingInteraction,
    begin_link_interaction,
    begin_tooltip_interaction,
    complete_interaction,
    run_link_dialog,
    run_tooltip_dialog,
)
from glossmark.annotations.links import create_link
from glossmark.annotations.overlay import MarkerEntry, OverlayManager

__all__ = [
    "DialogResult",
    "DialogSurface",
    "InteractionOutcome",
    "MarkerEntry",
    "Outcome",
    "OverlayManager",
    "PendingInteraction",
    "begin_link_interaction",
    "begin_tooltip_interaction",
    "complete_interaction",
    "create_link",
    "run_link_dialog",
    "run_tooltip_dialog",
]
