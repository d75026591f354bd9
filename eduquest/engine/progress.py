"""Course progress calculation"""

from dataclasses import dataclass

from eduquest.utils.timeutils import round_half_up


@dataclass(frozen=True)
class ProgressSnapshot:
    completed_lessons: int
    total_lessons: int
    percentage: int
    is_completed: bool


def compute_progress(completed_lessons: int, total_lessons: int) -> ProgressSnapshot:
    if total_lessons <= 0:
        percentage = 0
    else:
        percentage = round_half_up(100 * completed_lessons / total_lessons)

    return ProgressSnapshot(
        completed_lessons=completed_lessons,
        total_lessons=total_lessons,
        percentage=percentage,
        is_completed=percentage == 100,
    )
