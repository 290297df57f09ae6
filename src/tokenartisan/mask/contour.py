"""Marching squares boundary walk.

The walk visits the corners between cells. For every corner it looks at the
four cells around it (top-left, top-right, bottom-left, bottom-right) and
encodes which of them are inside as a 4 bit case index that decides the next
step. Only the corners where the direction changes are returned, which is
enough to describe the closed polyline.
"""
from typing import Callable, Optional

# step per case, the saddle cases 6 and 9 depend on the previous step
STEP_X = (1, 0, 1, 1, -1, 0, -1, 1, 0, 0, 0, 0, -1, 0, -1, None)
STEP_Y = (0, -1, 0, 0, 0, -1, 0, 0, 1, -1, 1, 1, 0, -1, 0, None)


def contour_start(grid: Callable[[int, int], bool], width: int, height: int) -> Optional[tuple]:
    """Finds where to start the walk. The walk follows a single closed outline, the one around this cell."""
    # scan anti-diagonals so the cells above and to the left of the hit are outside
    for diagonal in range(width + height - 1):
        for x in range(min(diagonal, width - 1), -1, -1):
            y = diagonal - x
            if y >= height:
                break
            if grid(x, y):
                return (x, y)
    return None


def contour(grid: Callable[[int, int], bool], start: tuple) -> list:
    start_x, start_y = start
    x, y = start_x, start_y
    previous_x = previous_y = None
    points = []

    while True:
        case = 0
        if grid(x - 1, y - 1):
            case += 1
        if grid(x, y - 1):
            case += 2
        if grid(x - 1, y):
            case += 4
        if grid(x, y):
            case += 8

        if case == 6:
            step_x = -1 if previous_y == -1 else 1
            step_y = 0
        elif case == 9:
            step_x = 0
            step_y = -1 if previous_x == 1 else 1
        else:
            step_x = STEP_X[case]
            step_y = STEP_Y[case]

        if step_x is None:
            raise ValueError(f"Contour walk started inside the region at {start}")

        if step_x != previous_x and step_y != previous_y:
            points.append((x, y))
            previous_x = step_x
            previous_y = step_y

        x += step_x
        y += step_y

        if (x, y) == (start_x, start_y):
            return points
