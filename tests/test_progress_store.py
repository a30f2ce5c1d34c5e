import uuid
from datetime import datetime, timezone

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.schemas.progress import SetEntryWrite
from app.services import category_store, progress_store, set_store

T1 = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
T2 = datetime(2024, 2, 10, 9, 0, tzinfo=timezone.utc)


async def test_history_newest_first_and_current_is_latest(db, student, exercise):
    older = await progress_store.append(db, student.id, exercise.id, weight=20, reps=10, sets=3, recorded_at=T1)
    newer = await progress_store.append(db, student.id, exercise.id, weight=25, reps=10, sets=3, recorded_at=T2)

    current = await progress_store.list_current_per_exercise(db, student.id)
    history = await progress_store.list_history(db, student.id, exercise.id)

    assert [r.id for r in current] == [newer.id]
    assert float(current[0].weight) == 25.0
    assert [r.id for r in history] == [newer.id, older.id]
    assert [float(r.weight) for r in history] == [25.0, 20.0]


async def test_history_inserted_out_of_order(db, student, exercise):
    newer = await progress_store.append(db, student.id, exercise.id, weight=25, recorded_at=T2)
    older = await progress_store.append(db, student.id, exercise.id, weight=20, recorded_at=T1)

    history = await progress_store.list_history(db, student.id, exercise.id)
    assert [r.id for r in history] == [newer.id, older.id]


async def test_timestamp_tie_goes_to_earliest_inserted(db, student, exercise):
    first = await progress_store.append(db, student.id, exercise.id, weight=30, recorded_at=T1)
    second = await progress_store.append(db, student.id, exercise.id, weight=35, recorded_at=T1)

    current = await progress_store.list_current_per_exercise(db, student.id)
    history = await progress_store.list_history(db, student.id, exercise.id)

    assert [r.id for r in current] == [first.id]
    assert [r.id for r in history] == [first.id, second.id]


async def test_current_per_exercise_across_exercises(db, student, other_student, exercise, squat):
    await progress_store.append(db, student.id, exercise.id, weight=20, recorded_at=T1)
    bench = await progress_store.append(db, student.id, exercise.id, weight=22, recorded_at=T2)
    legs = await progress_store.append(db, student.id, squat.id, weight=80, recorded_at=T1)
    await progress_store.append(db, other_student.id, squat.id, weight=100, recorded_at=T2)

    current = await progress_store.list_current_per_exercise(db, student.id)

    assert {r.id for r in current} == {bench.id, legs.id}


async def test_append_coerces_numbers(db, student, exercise):
    record = await progress_store.append(
        db, student.id, exercise.id, weight="abc", reps="8-10", sets=None, notes="  first day  "
    )
    assert float(record.weight) == 0.0
    assert record.reps == "0"
    assert record.sets == 0
    assert record.notes == "first day"
    assert record.recorded_at is not None


async def test_append_checks_references(db, student, other_student, exercise):
    with pytest.raises(NotFoundError):
        await progress_store.append(db, uuid.uuid4(), exercise.id)
    with pytest.raises(NotFoundError):
        await progress_store.append(db, student.id, uuid.uuid4())
    with pytest.raises(NotFoundError):
        await progress_store.append(db, student.id, exercise.id, category_id=uuid.uuid4())

    foreign = await category_store.create_category(db, other_student.id, "Upper")
    with pytest.raises(ValidationError):
        await progress_store.append(db, student.id, exercise.id, category_id=foreign.id)


async def test_update_latest_refreshes_date_and_keeps_text_reps(db, student, exercise):
    older = await progress_store.append(db, student.id, exercise.id, weight=20, reps=10, recorded_at=T1)
    newer = await progress_store.append(db, student.id, exercise.id, weight=25, reps=10, recorded_at=T2)

    updated = await progress_store.update_latest(
        db, older.id, {"weight": "27.5", "reps": "8-10", "sets": "4", "notes": "felt strong"}
    )

    assert updated.id == older.id
    assert float(updated.weight) == 27.5
    assert updated.reps == "8-10"
    assert updated.sets == 4
    assert updated.notes == "felt strong"
    history = await progress_store.list_history(db, student.id, exercise.id)
    assert [r.id for r in history] == [older.id, newer.id]


async def test_update_latest_rejects_blank_reps(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id, reps=10, recorded_at=T1)
    with pytest.raises(ValidationError):
        await progress_store.update_latest(db, record.id, {"reps": " "})

    await db.refresh(record)
    assert record.reps == "10"


async def test_oversized_load_rejected_before_write(db, student, exercise):
    with pytest.raises(ValidationError):
        await progress_store.append(db, student.id, exercise.id, weight=1e6, reps=5)
    assert await progress_store.list_history(db, student.id, exercise.id) == []

    record = await progress_store.append(db, student.id, exercise.id, weight=999999.99, reps=5, recorded_at=T1)
    with pytest.raises(ValidationError):
        await progress_store.update_latest(db, record.id, {"weight": "1000000"})

    await db.refresh(record)
    assert float(record.weight) == 999999.99
    assert record.recorded_at.replace(tzinfo=None) == T1.replace(tzinfo=None)


async def test_update_latest_rejects_unknown_fields_and_records(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id)
    with pytest.raises(ValidationError):
        await progress_store.update_latest(db, record.id, {"student_id": uuid.uuid4()})
    with pytest.raises(NotFoundError):
        await progress_store.update_latest(db, 12345, {"weight": 10})


async def test_remove_deletes_one_record_and_its_sets(db, student, exercise):
    older = await progress_store.append(db, student.id, exercise.id, weight=20, recorded_at=T1)
    newer = await progress_store.append(db, student.id, exercise.id, weight=25, recorded_at=T2)
    await set_store.replace_sets(db, newer.id, [SetEntryWrite(reps=5)] * 3)

    await progress_store.remove(db, newer.id)

    history = await progress_store.list_history(db, student.id, exercise.id)
    assert [r.id for r in history] == [older.id]
    assert await set_store.count_sets(db, [newer.id]) == {}
    with pytest.raises(NotFoundError):
        await progress_store.remove(db, newer.id)


async def test_add_exercise_to_student(db, student, exercise):
    category = await category_store.create_category(db, student.id, "Push")

    record = await progress_store.add_exercise_to_student(db, student.id, exercise.id, category.id)

    assert record.category_id == category.id
    assert float(record.weight) == 0.0
    assert record.reps == "0"
    assert record.sets == 0
    with pytest.raises(ValidationError):
        await progress_store.add_exercise_to_student(db, student.id, exercise.id)


async def test_list_all_history_filters(db, student, other_student, exercise, squat):
    a = await progress_store.append(db, student.id, exercise.id, recorded_at=T1)
    b = await progress_store.append(db, student.id, squat.id, recorded_at=T2)
    c = await progress_store.append(db, other_student.id, exercise.id, recorded_at=T2)

    assert [r.id for r in await progress_store.list_all_history(db)] == [b.id, c.id, a.id]
    assert [r.id for r in await progress_store.list_all_history(db, student_id=student.id)] == [b.id, a.id]
    assert [r.id for r in await progress_store.list_all_history(db, exercise_id=exercise.id)] == [c.id, a.id]
    assert [r.id for r in await progress_store.list_all_history(db, student.id, exercise.id)] == [a.id]


async def test_delete_for_student_cascades(db, student, other_student, exercise):
    mine = await progress_store.append(db, student.id, exercise.id)
    theirs = await progress_store.append(db, other_student.id, exercise.id)
    await set_store.replace_sets(db, mine.id, [SetEntryWrite(reps=5)])

    removed = await progress_store.delete_for_student(db, student.id)

    assert removed == 1
    assert await progress_store.list_student_history(db, student.id) == []
    assert [r.id for r in await progress_store.list_student_history(db, other_student.id)] == [theirs.id]
    assert await set_store.count_sets(db, [mine.id]) == {}
