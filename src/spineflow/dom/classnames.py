"""Class-name composition with utility-class conflict resolution.

``merge`` does two passes:

1. **Compose** (``compose``): flatten strings, iterables and mappings
   (``{"hidden": not visible}``) into one ordered list, dropping falsy entries.
2. **Resolve** (``resolve_conflicts``): when two utility classes set the same
   property under the same variants, the later one wins.

    >>> merge("px-2 py-1 bg-red-500", {"bg-blue-500": True, "hidden": False})
    'px-2 py-1 bg-blue-500'
    >>> merge("px-2", "p-4")
    'p-4'
    >>> merge("p-4", "px-2")
    'p-4 px-2'
    >>> merge("text-xs text-red-500", "hover:text-sm", "text-lg")
    'text-red-500 hover:text-sm text-lg'

Classes that are not recognised as utilities are always kept.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


_DISPLAY = {
    "block", "inline-block", "inline", "flex", "inline-flex", "grid", "inline-grid",
    "hidden", "contents", "table", "flow-root", "list-item",
}
_POSITION = {"static", "fixed", "absolute", "relative", "sticky"}
_VISIBILITY = {"visible", "invisible", "collapse"}
_SIZES = {"xs", "sm", "base", "md", "lg", "xl"} | {f"{n}xl" for n in range(2, 10)}
_ALIGN = {"left", "center", "right", "justify", "start", "end"}
_WEIGHTS = {
    "thin", "extralight", "light", "normal", "medium",
    "semibold", "bold", "extrabold", "black",
}
_BORDER_STYLES = {"solid", "dashed", "dotted", "double", "hidden", "none"}
_SIDES = ("x", "y", "t", "r", "b", "l", "s", "e")
_CORNERS = ("t", "r", "b", "l", "s", "e", "tl", "tr", "br", "bl", "ss", "se", "es", "ee")
_SHADOW_SIZES = {"sm", "md", "lg", "xl", "2xl", "inner", "none"}
_OUTLINE_STYLES = {"none", "dashed", "dotted", "double"}
_BG_SIZES = {"auto", "cover", "contain"}
_BG_POSITIONS = {
    "bottom", "center", "left", "left-bottom", "left-top",
    "right", "right-bottom", "right-top", "top",
}
_BG_REPEATS = {"repeat", "no-repeat", "repeat-x", "repeat-y", "repeat-round", "repeat-space"}
_BG_ATTACHMENTS = {"fixed", "local", "scroll"}

# Prefix stems whose whole family is one group, longest match first.
_STEMS = sorted(
    [
        "p", "px", "py", "pt", "pr", "pb", "pl", "ps", "pe",
        "m", "mx", "my", "mt", "mr", "mb", "ml", "ms", "me",
        "inset", "inset-x", "inset-y", "top", "right", "bottom", "left", "start", "end",
        "w", "h", "size", "min-w", "max-w", "min-h", "max-h",
        "z", "opacity", "order", "gap", "gap-x", "gap-y",
        "translate-x", "translate-y", "rotate", "scale", "scale-x", "scale-y",
        "leading", "tracking", "whitespace", "pointer-events", "cursor", "select",
        "overflow", "overflow-x", "overflow-y", "justify", "items", "self", "content",
        "grid-cols", "grid-rows", "col-span", "row-span", "basis", "grow", "shrink",
        "duration", "ease", "delay", "blur",
    ],
    key=len,
    reverse=True,
)

# A later class of the key group also overrides earlier classes of these groups.
_OVERRIDES: dict[str, tuple[str, ...]] = {
    "p": ("px", "py", "pt", "pr", "pb", "pl", "ps", "pe"),
    "px": ("pr", "pl", "ps", "pe"),
    "py": ("pt", "pb"),
    "m": ("mx", "my", "mt", "mr", "mb", "ml", "ms", "me"),
    "mx": ("mr", "ml", "ms", "me"),
    "my": ("mt", "mb"),
    "inset": ("inset-x", "inset-y", "top", "right", "bottom", "left", "start", "end"),
    "inset-x": ("right", "left"),
    "inset-y": ("top", "bottom"),
    "size": ("w", "h"),
    "gap": ("gap-x", "gap-y"),
    "overflow": ("overflow-x", "overflow-y"),
    "scale": ("scale-x", "scale-y"),
    "rounded": tuple(f"rounded-{corner}" for corner in _CORNERS),
    "border-w": tuple(f"border-w-{side}" for side in _SIDES),
    "border-color": tuple(f"border-color-{side}" for side in _SIDES),
}


def compose(*classes: Any) -> list[str]:
    """Flatten conditional class input into an ordered list of class tokens."""
    tokens: list[str] = []
    for item in classes:
        if item is None or isinstance(item, bool):
            continue
        if isinstance(item, str):
            tokens.extend(item.split())
        elif isinstance(item, (int, float)):
            if item:
                tokens.append(str(item))
        elif isinstance(item, Mapping):
            tokens.extend(str(name) for name, enabled in item.items() if enabled)
        elif isinstance(item, Iterable):
            tokens.extend(compose(*item))
    return tokens


def _split_variants(token: str) -> tuple[str, str]:
    """Split ``hover:md:p-4`` into (``hover:md``, ``p-4``), ignoring ':' inside brackets."""
    depth = 0
    cut = -1
    for index, char in enumerate(token):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == ":" and depth == 0:
            cut = index
    if cut < 0:
        return "", token
    return token[:cut], token[cut + 1:]


def _family(stem: str, base: str) -> bool:
    return base == stem or base.startswith(stem + "-")


def _is_width(value: str) -> bool:
    """``2`` or an arbitrary length such as ``[3px]``; anything else is a color."""
    return value.isdigit() or (value.startswith("[") and value[1:2].isdigit())


def _bg_group(value: str) -> str:
    if value in _BG_SIZES:
        return "bg-size"
    if value in _BG_POSITIONS:
        return "bg-position"
    if value in _BG_REPEATS:
        return "bg-repeat"
    if value in _BG_ATTACHMENTS:
        return "bg-attachment"
    if value == "none" or value.startswith("gradient-"):
        return "bg-image"
    for prefix in ("clip", "origin", "blend", "opacity"):
        if value.startswith(prefix + "-"):
            return f"bg-{prefix}"
    return "bg-color"


def _border_group(value: str) -> str:
    if not value or _is_width(value):
        return "border-w"
    side, _, rest = value.partition("-")
    if side in _SIDES:
        # border-t / border-t-2 set a width, border-t-red-500 a color
        if not rest or _is_width(rest):
            return f"border-w-{side}"
        return f"border-color-{side}"
    if value in _BORDER_STYLES:
        return "border-style"
    if side == "opacity":
        return "border-opacity"
    return "border-color"


def _ring_group(value: str) -> str:
    if not value or _is_width(value):
        return "ring-w"
    if value == "inset":
        return "ring-inset"
    if value.startswith("offset-"):
        return "ring-offset-w" if _is_width(value[len("offset-"):]) else "ring-offset-color"
    if value.startswith("opacity-"):
        return "ring-opacity"
    return "ring-color"


def _outline_group(value: str) -> str:
    if not value or value in _OUTLINE_STYLES:
        return "outline-style"
    if _is_width(value):
        return "outline-w"
    if value.startswith("offset-"):
        return "outline-offset"
    return "outline-color"


def _group_of(base: str) -> str | None:
    if base in _DISPLAY:
        return "display"
    if base in _POSITION:
        return "position"
    if base in _VISIBILITY:
        return "visibility"

    head, _, value = base.partition("-")
    if head == "text" and value:
        if value in _SIZES:
            return "font-size"
        if value in _ALIGN:
            return "text-align"
        return "text-color"
    if head == "font" and value:
        return "font-weight" if value in _WEIGHTS else "font-family"
    if head == "bg" and value:
        return _bg_group(value)
    if head == "rounded":
        side = value.split("-", 1)[0] if value else ""
        return f"rounded-{side}" if side in _CORNERS else "rounded"
    if head == "border":
        return _border_group(value)
    if head == "ring":
        return _ring_group(value)
    if head == "outline":
        return _outline_group(value)
    if head == "shadow":
        return "shadow" if not value or value in _SHADOW_SIZES else "shadow-color"
    if head == "flex" and value in {"row", "row-reverse", "col", "col-reverse"}:
        return "flex-direction"
    if head == "flex" and value in {"wrap", "wrap-reverse", "nowrap"}:
        return "flex-wrap"

    for stem in _STEMS:
        if _family(stem, base):
            return stem
    return None


def _conflict_key(token: str) -> tuple[str, bool, str] | None:
    variants, base = _split_variants(token)
    important = base.startswith("!") or base.endswith("!")
    base = base.strip("!")
    if base.startswith("-"):
        base = base[1:]
    group = _group_of(base)
    if group is None:
        return None
    return variants, important, group


def resolve_conflicts(tokens: list[str]) -> list[str]:
    """Drop classes overridden by a later class of the same group and variants."""
    seen: set[tuple[str, bool, str]] = set()
    kept: list[str] = []
    for token in reversed(tokens):
        key = _conflict_key(token)
        if key is None:
            kept.append(token)
            continue
        if key in seen:
            continue
        variants, important, group = key
        seen.add(key)
        for overridden in _OVERRIDES.get(group, ()):
            seen.add((variants, important, overridden))
        kept.append(token)
    kept.reverse()
    return kept


def merge(*classes: Any) -> str:
    """Compose conditional class input and resolve utility conflicts."""
    return " ".join(resolve_conflicts(compose(*classes)))


__all__ = ["merge", "compose", "resolve_conflicts"]
