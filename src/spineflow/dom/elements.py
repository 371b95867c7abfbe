"""Element construction helpers built on ``xml.etree.ElementTree``.

These are plain functions with no pipeline behavior; they compose with
``Flow.map`` like any other transformer::

    badge = flow("New").map(lambda text: create_element("span", {"class": "badge"}, text))
    wrapped = badge.pipe(create_tooltip, "Added this week", "right").get()
"""

from __future__ import annotations

from typing import Literal, Mapping, Union
from xml.etree import ElementTree

from spineflow.core.errors import FlowValidationError


AttributeValue = Union[str, int, float, bool, None]
TooltipPosition = Literal["top", "right", "bottom", "left"]

TOOLTIP_CLASSES = (
    "absolute hidden group-hover:block z-50 px-3 py-2 text-xs bg-neutral-950 "
    "text-light rounded pointer-events-none whitespace-nowrap"
)

TOOLTIP_POSITIONS: dict[str, tuple[str, ...]] = {
    "top": ("bottom-full", "left-1/2", "-translate-x-1/2", "-translate-y-1"),
    "right": ("left-full", "top-1/2", "translate-x-1", "-translate-y-1/2"),
    "bottom": ("top-full", "left-1/2", "-translate-x-1/2", "translate-y-1"),
    "left": ("right-full", "top-1/2", "-translate-x-1", "-translate-y-1/2"),
}


def _attribute_text(value: AttributeValue) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "" if value else "false"
    return str(value)


def create_element(
    tag: str,
    attributes: Mapping[str, AttributeValue] | None = None,
    content: str | ElementTree.Element | None = None,
) -> ElementTree.Element:
    """Build an element with attributes and optional text or child content.

    Boolean attributes render as ``""`` (True) or ``"false"`` (False); None
    values are skipped.
    """
    element = ElementTree.Element(tag)
    for name, value in (attributes or {}).items():
        text = _attribute_text(value)
        if text is not None:
            element.set(name, text)
    if isinstance(content, str):
        element.text = content
    elif isinstance(content, ElementTree.Element):
        element.append(content)
    return element


def add_classes(element: ElementTree.Element, *classes: str) -> ElementTree.Element:
    """Append classes to ``element``'s class attribute, skipping duplicates."""
    current = element.get("class", "").split()
    for name in classes:
        if name not in current:
            current.append(name)
    element.set("class", " ".join(current))
    return element


def create_tooltip(
    element: ElementTree.Element,
    title: str,
    position: TooltipPosition = "top",
) -> ElementTree.Element:
    """Wrap ``element`` in a hover group with a positioned tooltip label."""
    if position not in TOOLTIP_POSITIONS:
        raise FlowValidationError(
            f"unknown tooltip position: {position!r}",
            field="position",
            value=position,
        )
    wrapper = create_element("div", {"class": "relative"})
    tooltip = create_element("div", {"class": TOOLTIP_CLASSES}, title)
    add_classes(tooltip, *TOOLTIP_POSITIONS[position])

    add_classes(wrapper, "group")
    wrapper.append(tooltip)
    wrapper.append(element)
    return wrapper


def to_html(element: ElementTree.Element) -> str:
    """Serialize an element tree as an HTML string."""
    return ElementTree.tostring(element, encoding="unicode", method="html")


__all__ = [
    "create_element",
    "create_tooltip",
    "add_classes",
    "to_html",
    "TOOLTIP_POSITIONS",
]
