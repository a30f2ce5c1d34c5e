import pytest
from sqlalchemy.dialects import postgresql

from app.core.enums import SetType
from app.core.errors import NotFoundError, ValidationError
from app.schemas.progress import SetEntryWrite
from app.services import progress_store, set_store
from app.services.reps import NumericReps, TextReps


async def test_legacy_fallback_when_record_has_no_sets(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id, weight=40, reps=10, sets=3)

    sets = await set_store.load_sets(db, record.id)

    assert len(sets) == 3
    for i, s in enumerate(sets):
        assert s.set_number == i
        assert s.set_type is SetType.VALID_1
        assert s.weight == 40.0
        assert s.reps == NumericReps(10)
        assert s.notes == ""
        assert s.is_legacy


async def test_legacy_fallback_is_empty_without_aggregate(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id, weight=40, reps=10, sets=0)
    assert await set_store.load_sets(db, record.id) == []


async def test_replace_assigns_positions_in_order(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id, weight=40, reps=10, sets=3)

    saved = await set_store.replace_sets(
        db,
        record.id,
        [
            SetEntryWrite(set_type=SetType.WARMUP, weight="20", reps=15, notes=" easy "),
            SetEntryWrite(set_type=SetType.PREPARATION, weight=30, reps="8-10"),
            SetEntryWrite(set_type=SetType.VALID_1, weight="oops", reps="6"),
        ],
    )
    loaded = await set_store.load_sets(db, record.id)

    assert [s.set_number for s in loaded] == [0, 1, 2]
    assert [s.set_type for s in loaded] == [SetType.WARMUP, SetType.PREPARATION, SetType.VALID_1]
    assert [s.weight for s in loaded] == [20.0, 30.0, 0.0]
    assert [s.reps for s in loaded] == [NumericReps(15), TextReps("8-10"), NumericReps(6)]
    assert loaded[0].notes == "easy"
    assert not any(s.is_legacy for s in loaded)
    assert [s.id for s in saved] == [s.id for s in loaded]


async def test_replace_discards_previous_rows(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id, sets=0)
    await set_store.replace_sets(db, record.id, [SetEntryWrite(reps=5)] * 4)
    await set_store.replace_sets(db, record.id, [SetEntryWrite(set_type=SetType.VALID_2, reps=3)])

    loaded = await set_store.load_sets(db, record.id)
    assert len(loaded) == 1
    assert loaded[0].set_type is SetType.VALID_2
    assert loaded[0].set_number == 0


async def test_replace_with_empty_falls_back_to_legacy(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id, weight=50, reps=8, sets=2)
    await set_store.replace_sets(db, record.id, [SetEntryWrite(reps=5)] * 4)

    await set_store.replace_sets(db, record.id, [])

    loaded = await set_store.load_sets(db, record.id)
    assert len(loaded) == 2
    assert all(s.is_legacy and s.weight == 50.0 and s.reps == NumericReps(8) for s in loaded)


async def test_replace_with_empty_and_no_aggregate_is_empty(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id, weight=50, reps=8, sets=0)
    await set_store.replace_sets(db, record.id, [SetEntryWrite(reps=5)])

    await set_store.replace_sets(db, record.id, [])

    assert await set_store.load_sets(db, record.id) == []


async def test_invalid_entry_leaves_existing_sets(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id, sets=0)
    await set_store.replace_sets(db, record.id, [SetEntryWrite(reps=5), SetEntryWrite(reps=6)])

    with pytest.raises(ValidationError, match="set 2"):
        await set_store.replace_sets(db, record.id, [SetEntryWrite(reps=5), SetEntryWrite(reps="  ")])

    loaded = await set_store.load_sets(db, record.id)
    assert [s.reps for s in loaded] == [NumericReps(5), NumericReps(6)]


async def test_failure_after_delete_restores_existing_sets(db, student, exercise, monkeypatch):
    record = await progress_store.append(db, student.id, exercise.id, sets=0)
    await set_store.replace_sets(db, record.id, [SetEntryWrite(reps=5), SetEntryWrite(reps=6)])

    def broken_add_all(instances):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(db, "add_all", broken_add_all)
    with pytest.raises(RuntimeError):
        await set_store.replace_sets(db, record.id, [SetEntryWrite(reps=9)])
    monkeypatch.undo()

    loaded = await set_store.load_sets(db, record.id)
    assert [s.reps for s in loaded] == [NumericReps(5), NumericReps(6)]
    assert not any(s.is_legacy for s in loaded)


async def test_too_many_sets_rejected(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id)
    with pytest.raises(ValidationError):
        await set_store.replace_sets(db, record.id, [SetEntryWrite(reps=1)] * 51)


async def test_unknown_record(db):
    with pytest.raises(NotFoundError):
        await set_store.load_sets(db, 999)
    with pytest.raises(NotFoundError):
        await set_store.replace_sets(db, 999, [])


async def test_count_sets_omits_records_without_rows(db, student, exercise, squat):
    a = await progress_store.append(db, student.id, exercise.id, sets=3)
    b = await progress_store.append(db, student.id, squat.id, sets=3)
    await set_store.replace_sets(db, a.id, [SetEntryWrite(reps=1)] * 5)

    counts = await set_store.count_sets(db, {a.id, b.id})

    assert counts == {a.id: 5}
    assert await set_store.count_sets(db, set()) == {}


async def test_oversized_load_rejected_before_write(db, student, exercise):
    record = await progress_store.append(db, student.id, exercise.id, sets=0)
    await set_store.replace_sets(db, record.id, [SetEntryWrite(weight=100, reps=5)])

    with pytest.raises(ValidationError, match="set 2"):
        await set_store.replace_sets(
            db, record.id, [SetEntryWrite(weight=100, reps=5), SetEntryWrite(weight=1_000_000, reps=5)]
        )

    loaded = await set_store.load_sets(db, record.id)
    assert [s.weight for s in loaded] == [100.0]


async def test_replace_locks_the_record_row_first(db, student, exercise, monkeypatch):
    record = await progress_store.append(db, student.id, exercise.id, sets=0)
    issued = []
    execute = db.execute

    async def recording_execute(statement, *args, **kwargs):
        issued.append(statement)
        return await execute(statement, *args, **kwargs)

    monkeypatch.setattr(db, "execute", recording_execute)
    await set_store.replace_sets(db, record.id, [SetEntryWrite(reps=5)])
    monkeypatch.undo()

    first = str(issued[0].compile(dialect=postgresql.dialect()))
    assert first.startswith("SELECT")
    assert first.rstrip().endswith("FOR UPDATE")
    assert "progress_records" in first
