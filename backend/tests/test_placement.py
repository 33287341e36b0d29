import random

import pytest

from app.schemas.scheduling import SchedulingConfig
from app.services.placement import LabPlacer, SubjectRequest, TheoryPlacer
from app.services.timetable_grid import SectionAssignment, SessionKind, TeacherAssignment, TimetableGrid


def _subject(priority=1, *, is_lab=False, name="Math", code="M1"):
    return SubjectRequest(subject_id=0, name=name, code=code, priority=priority, is_lab=is_lab)


def _new_grid(config):
    return TimetableGrid(config.days, config.slot_count, max_consecutive=config.max_consecutive_classes)


def _grids(config):
    return _new_grid(config), _new_grid(config)


def _filler(section="X"):
    return TeacherAssignment(subject="Other", code="O1", section=section, kind=SessionKind.theory)


def _count(grid):
    return len(list(grid.occupied_cells()))


@pytest.mark.parametrize("priority, expected", [(1, 4), (2, 3), (3, 2), (4, 1), (5, 1), (0, 1), (None, 1)])
def test_theory_places_required_period_count(priority, expected):
    config = SchedulingConfig()
    section_grid, teacher_grid = _grids(config)

    outcome = TheoryPlacer(config, random.Random(11)).place(
        _subject(priority),
        teacher_name="Alice",
        section_name="A",
        section_grid=section_grid,
        teacher_grid=teacher_grid,
    )

    assert outcome.success
    assert outcome.required == expected
    assert _count(section_grid) == expected
    assert _count(teacher_grid) == expected
    for day, slot, assignment in section_grid.occupied_cells():
        assert assignment.type_label == "Theory"
        assert assignment.teacher == "Alice"
        mirror = teacher_grid.cell(day, slot)
        assert mirror.section == "A"
        assert mirror.type_label == "Theory"


def test_theory_skips_busy_teacher_slots():
    config = SchedulingConfig(days=["Monday"], slots=["1", "2", "3", "4", "5"])
    section_grid, teacher_grid = _grids(config)
    for slot in (0, 2, 4):
        teacher_grid.place("Monday", slot, _filler())

    outcome = TheoryPlacer(config, random.Random(5)).place(
        _subject(3),
        teacher_name="Alice",
        section_name="A",
        section_grid=section_grid,
        teacher_grid=teacher_grid,
    )

    assert outcome.success
    assert sorted(slot for _, slot, _ in section_grid.occupied_cells()) == [1, 3]


@pytest.mark.parametrize("seed", range(25))
def test_theory_never_exceeds_consecutive_limit(seed):
    config = SchedulingConfig(days=["Monday"], slots=["1", "2", "3", "4", "5"])
    section_grid, teacher_grid = _grids(config)

    outcome = TheoryPlacer(config, random.Random(seed)).place(
        _subject(1),
        teacher_name="Alice",
        section_name="A",
        section_grid=section_grid,
        teacher_grid=teacher_grid,
    )

    assert outcome.placed >= 3
    assert section_grid.longest_run("Monday") <= 3


def test_theory_keeps_partial_placement_on_failure():
    config = SchedulingConfig(days=["Monday"], slots=["1", "2", "3", "4", "5"])
    section_grid, teacher_grid = _grids(config)
    for slot in (0, 1, 2):
        teacher_grid.place("Monday", slot, _filler())

    outcome = TheoryPlacer(config, random.Random(1)).place(
        _subject(1),
        teacher_name="Alice",
        section_name="A",
        section_grid=section_grid,
        teacher_grid=teacher_grid,
    )

    assert not outcome.success
    assert outcome.placed == 2
    assert sorted(slot for _, slot, _ in section_grid.occupied_cells()) == [3, 4]
    assert _count(teacher_grid) == 5


def test_theory_rollback_clears_partial_cells():
    config = SchedulingConfig(days=["Monday"], slots=["1", "2", "3", "4", "5"])
    section_grid, teacher_grid = _grids(config)
    for slot in (0, 1, 2):
        teacher_grid.place("Monday", slot, _filler())

    outcome = TheoryPlacer(config, random.Random(1)).place(
        _subject(1),
        teacher_name="Alice",
        section_name="A",
        section_grid=section_grid,
        teacher_grid=teacher_grid,
    )
    TheoryPlacer.rollback(outcome, section_grid=section_grid, teacher_grid=teacher_grid)

    assert _count(section_grid) == 0
    assert _count(teacher_grid) == 3
    assert outcome.placed == 0


@pytest.mark.parametrize("seed", range(10))
def test_lab_occupies_two_contiguous_slots(seed):
    config = SchedulingConfig()
    section_grid, teacher_grid = _grids(config)

    outcome = LabPlacer(config, random.Random(seed)).place(
        _subject(2, is_lab=True, name="Physics Lab", code="PL1"),
        teacher_name="Bob",
        section_name="A",
        section_grid=section_grid,
        teacher_grid=teacher_grid,
    )

    assert outcome.success
    cells = list(section_grid.occupied_cells())
    assert len(cells) == 2
    (day_one, slot_one, first), (day_two, slot_two, second) = cells
    assert day_one == day_two
    assert slot_two == slot_one + 1
    assert first.type_label == "Lab (1/2)"
    assert second.type_label == "Lab (2/2)"
    assert first.teacher == second.teacher == "Bob"
    for day, slot, _ in cells:
        mirror = teacher_grid.cell(day, slot)
        assert mirror.type_label == "Lab"
        assert mirror.section == "A"


def test_lab_failure_leaves_grids_untouched():
    config = SchedulingConfig(days=["Monday"], slots=["1", "2", "3"])
    section_grid, teacher_grid = _grids(config)
    section_grid.place(
        "Monday", 1, SectionAssignment(subject="Math", code="M1", teacher="Alice", kind=SessionKind.theory)
    )
    before_section = section_grid.to_payload()
    before_teacher = teacher_grid.to_payload()

    outcome = LabPlacer(config, random.Random(0)).place(
        _subject(2, is_lab=True),
        teacher_name="Bob",
        section_name="A",
        section_grid=section_grid,
        teacher_grid=teacher_grid,
    )

    assert not outcome.success
    assert outcome.placed == 0
    assert section_grid.to_payload() == before_section
    assert teacher_grid.to_payload() == before_teacher


def test_lab_respects_teacher_grid():
    config = SchedulingConfig(days=["Monday"], slots=["1", "2", "3", "4"])
    section_grid, teacher_grid = _grids(config)
    teacher_grid.place("Monday", 1, _filler())

    outcome = LabPlacer(config, random.Random(4)).place(
        _subject(2, is_lab=True),
        teacher_name="Bob",
        section_name="A",
        section_grid=section_grid,
        teacher_grid=teacher_grid,
    )

    assert outcome.success
    assert outcome.cells == [("Monday", 2), ("Monday", 3)]


def test_lab_ignores_consecutive_limit():
    config = SchedulingConfig(days=["Monday"], slots=["1", "2", "3", "4", "5"])
    section_grid, teacher_grid = _grids(config)
    for slot in (0, 1, 2):
        section_grid.place(
            "Monday", slot, SectionAssignment(subject="Math", code="M1", teacher="Alice", kind=SessionKind.theory)
        )

    outcome = LabPlacer(config, random.Random(9)).place(
        _subject(2, is_lab=True),
        teacher_name="Bob",
        section_name="A",
        section_grid=section_grid,
        teacher_grid=teacher_grid,
    )

    assert outcome.success
    assert section_grid.longest_run("Monday") == 5


def test_lab_block_size_follows_config():
    config = SchedulingConfig(lab_slot_size=3)
    section_grid, teacher_grid = _grids(config)

    outcome = LabPlacer(config, random.Random(2)).place(
        _subject(2, is_lab=True),
        teacher_name="Bob",
        section_name="A",
        section_grid=section_grid,
        teacher_grid=teacher_grid,
    )

    assert outcome.success
    labels = [assignment.type_label for _, _, assignment in section_grid.occupied_cells()]
    assert labels == ["Lab (1/3)", "Lab (2/3)", "Lab (3/3)"]
