"""Layout passes that compute the sizes and positions of a widget tree."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator

from quadui.widget import Axis, SizeKind, Widget

logger = logging.getLogger(__name__)

_AXES = (Axis.HORIZONTAL, Axis.VERTICAL)


def _pre_order(widget: Widget) -> Iterator[Widget]:
    yield widget
    for child in widget.children():
        yield from _pre_order(child)


def _post_order(widget: Widget) -> Iterator[Widget]:
    for child in widget.children():
        yield from _post_order(child)
    yield widget


def sum_child_size(widget: Widget) -> list[float]:
    """Children stacked along the flow axis, widest child across it.

    Children floating on the flow axis take no part.
    """
    total = [0.0, 0.0]
    flow = Axis(widget.flow)
    cross = Axis(1 - flow)
    for child in widget.children():
        if child.is_floating(flow):
            continue
        total[flow] += child.computed_size[flow]
        total[cross] = max(total[cross], child.computed_size[cross])
    return total


def build_fixed_sizes(widget: Widget) -> None:
    """Resolve pixel- and text-sized axes of the whole subtree."""
    for node in _pre_order(widget):
        text_size = (0.0, 0.0)
        if any(size.kind is SizeKind.TEXT for size in node.size):
            if node.font is None:
                raise ValueError(f"widget '{node.id}' is sized by text but has no font")
            node.font.set_size(node.font_size)
            text_size = node.font.measure(node.text)
        for axis, size in zip(_AXES, node.size):
            if size.kind is SizeKind.PIXELS:
                node.computed_size[axis] = float(size.value)
            elif size.kind is SizeKind.TEXT:
                node.computed_size[axis] = float(text_size[axis])


def build_child_sizes(widget: Widget) -> None:
    """Resolve children-sized axes, innermost widgets first."""
    for node in _post_order(widget):
        if not any(size.kind is SizeKind.CHILDREN for size in node.size):
            continue
        child_sum = sum_child_size(node)
        for axis, size in zip(_AXES, node.size):
            if size.kind is SizeKind.CHILDREN:
                node.computed_size[axis] = child_sum[axis]


def build_parent_sizes(widget: Widget) -> None:
    """Resolve parent-relative axes, outermost widgets first."""
    for node in _pre_order(widget):
        for axis, size in zip(_AXES, node.size):
            if size.kind is not SizeKind.PARENT:
                continue
            if node.parent is None:
                raise ValueError(f"widget '{node.id}' is sized by its parent but has none")
            node.computed_size[axis] = node.parent.computed_size[axis] * size.value


def solve_size_violations(widget: Widget) -> None:
    """Shrink the non-strict part of children that overflow their parent."""
    for node in _post_order(widget):
        children = node.children()
        child_sum = sum_child_size(node)
        for axis in _AXES:
            violation = child_sum[axis] - node.computed_size[axis]
            if violation <= 0.0:
                continue
            budgets = [
                child.computed_size[axis] * (1.0 - child.size[axis].strictness)
                for child in children
            ]
            total_budget = sum(budgets)
            if total_budget < violation:
                logger.warning(
                    "Widget '%s' has a sizing violation of %.0f pixels on the %s-axis.",
                    node.id,
                    violation - total_budget,
                    "y" if axis is Axis.VERTICAL else "x",
                )
            scale = violation / total_budget if total_budget > 0.0 else 0.0
            for child, budget in zip(children, budgets):
                child.computed_size[axis] = float(
                    math.floor(child.computed_size[axis] - budget * scale)
                )


def build_positions(
    widget: Widget, relative_position: tuple[float, float] = (0.0, 0.0)
) -> tuple[float, float]:
    """Place ``widget`` and its subtree; return the cursor for the next sibling."""
    cursor = list(relative_position)
    parent = widget.parent
    if not (widget.is_floating(Axis.HORIZONTAL) and widget.is_floating(Axis.VERTICAL)):
        widget.computed_relative_position = list(relative_position)
    for axis in _AXES:
        if widget.is_floating(axis):
            continue
        if parent is None:
            widget.computed_absolute_position[axis] = cursor[axis]
        else:
            widget.computed_absolute_position[axis] = (
                parent.computed_absolute_position[axis] + cursor[axis]
            )
            if parent.flow == axis:
                cursor[axis] += widget.computed_size[axis]

    child_cursor = (0.0, 0.0)
    for child in widget.children():
        child_cursor = build_positions(child, child_cursor)
    return (cursor[0], cursor[1])


def layout(root: Widget) -> None:
    """Run every layout pass over the tree under ``root``."""
    build_fixed_sizes(root)
    build_child_sizes(root)
    build_parent_sizes(root)
    solve_size_violations(root)
    build_positions(root, (0.0, 0.0))