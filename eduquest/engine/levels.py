"""Level math"""

POINTS_PER_LEVEL = 100


def level_for_points(points: int) -> int:
    return int(points) // POINTS_PER_LEVEL + 1
