"""Element and class-name helpers, usable as ordinary flow transformers."""

from spineflow.dom.classnames import compose, merge, resolve_conflicts
from spineflow.dom.elements import add_classes, create_element, create_tooltip, to_html

__all__ = [
    "create_element",
    "create_tooltip",
    "add_classes",
    "to_html",
    "merge",
    "compose",
    "resolve_conflicts",
]
