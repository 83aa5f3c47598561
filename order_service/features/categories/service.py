"""Category tree assembly."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from order_service.features.categories.schemas import CategoryResponse, CategoryTreeNode

if TYPE_CHECKING:
    from collections.abc import Sequence

    from order_service.features.categories.models import Category


def build_category_tree(categories: Sequence[Category]) -> list[CategoryTreeNode]:
    """Nest categories under their parents, keeping the input order at every level.

    A category whose parent is missing from ``categories`` (or is itself)
    becomes a root. A parent cycle is cut where it is first entered, so every
    category appears exactly once.
    """
    known = {category.id for category in categories}
    children: dict[int, list[Category]] = defaultdict(list)
    roots: list[Category] = []
    for category in categories:
        parent_id = category.parent_id
        if parent_id is None or parent_id == category.id or parent_id not in known:
            roots.append(category)
        else:
            children[parent_id].append(category)

    placed: set[int] = set()

    def build(category: Category) -> CategoryTreeNode:
        placed.add(category.id)
        return CategoryTreeNode(
            **CategoryResponse.model_validate(category).model_dump(),
            children=[build(child) for child in children[category.id] if child.id not in placed],
        )

    tree = [build(category) for category in roots]
    # Categories only reachable through a cycle
    for category in categories:
        if category.id not in placed:
            tree.append(build(category))
    return tree
