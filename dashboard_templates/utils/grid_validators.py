"""Grid item validation against layout-size class bounds.

Each size class has a fixed column count; items must fit horizontally inside
it and stay within the row cap. Coordinates of 0 are valid placements.
"""

from typing import NamedTuple

from ..errors import InvalidGridItemError
from ..schemas import GridItem, GridSize


class GridBounds(NamedTuple):
    columns: int
    max_height: int


GRID_BOUNDS: dict[GridSize, GridBounds] = {
    GridSize.SM: GridBounds(columns=1, max_height=12),
    GridSize.MD: GridBounds(columns=2, max_height=12),
    GridSize.LG: GridBounds(columns=3, max_height=12),
    GridSize.XL: GridBounds(columns=4, max_height=12),
}


def _reject(item: GridItem, size: GridSize, constraint: str) -> InvalidGridItemError:
    return InvalidGridItemError(
        f"Invalid grid item: {constraint}",
        item_id=item.id,
        layout_size=size.value,
    )


def validate_grid_item(item: GridItem, size: GridSize) -> GridItem:
    """Validate a grid item for the given layout size and return it unchanged.

    Raises InvalidGridItemError naming the first violated constraint.
    """
    bounds = GRID_BOUNDS[size]

    if not item.id:
        raise _reject(item, size, "missing widget id")
    if item.x < 0:
        raise _reject(item, size, f"x must be >= 0, got {item.x}")
    if item.y < 0:
        raise _reject(item, size, f"y must be >= 0, got {item.y}")
    if item.w < 1 or item.w > bounds.columns:
        raise _reject(item, size, f"w must be between 1 and {bounds.columns}, got {item.w}")
    if item.x + item.w > bounds.columns:
        raise _reject(
            item, size, f"x + w must not exceed {bounds.columns} columns, got {item.x + item.w}"
        )
    if item.h < 1 or item.h > bounds.max_height:
        raise _reject(item, size, f"h must be between 1 and {bounds.max_height}, got {item.h}")
    if item.min_h is not None and item.min_h > item.h:
        raise _reject(item, size, f"minH {item.min_h} is greater than h {item.h}")
    if item.max_h is not None and item.max_h < item.h:
        raise _reject(item, size, f"maxH {item.max_h} is smaller than h {item.h}")
    return item
