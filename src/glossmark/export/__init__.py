"""Export of annotated documents."""

from glossmark.export.markdown import ElementKind, classify, render, render_node

__all__ = ["ElementKind", "classify", "render", "render_node"]
