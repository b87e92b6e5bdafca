import random

import pytest
from sqlalchemy import select

from trainsched.core.exceptions import ConflictError, InvalidSlotError
from trainsched.models.assignment import Draft, Schedule
from trainsched.services.conflict_service import (
    ConflictReason,
    SlotProposal,
    build_conflict_error,
    collision_reasons,
    commit_or_conflict,
    ensure_no_conflict,
    find_conflicts,
    has_conflict,
)


def _record(model, trainer_id="t-alice", room="Salle 1", group_name="DEV101", day_id=1, slot_id=1):
    return model(
        trainer_id=trainer_id,
        trainer_name=trainer_id,
        room=room,
        group_name=group_name,
        track_id="track-dev",
        track_name="DEV",
        day_id=day_id,
        slot_id=slot_id,
    )


def test_collision_reasons_lists_each_matching_dimension():
    record = _record(Schedule)
    proposal = SlotProposal(day_id=1, slot_id=1, trainer_id="t-alice", room="Salle 1", group_name="DEV102")
    assert collision_reasons(record, proposal) == [ConflictReason.trainer, ConflictReason.room]


def test_different_slot_never_collides():
    record = _record(Schedule)
    proposal = SlotProposal(day_id=1, slot_id=2, trainer_id="t-alice", room="Salle 1", group_name="DEV101")
    assert collision_reasons(record, proposal) == []


def test_find_conflicts_reports_collection_and_record(db_session):
    draft = _record(Draft, trainer_id="t-bob", room="Salle 2", group_name="DEV102")
    schedule = _record(Schedule)
    db_session.add_all([draft, schedule])
    db_session.commit()

    proposal = SlotProposal(day_id=1, slot_id=1, trainer_id="t-carol", room="Salle 1", group_name="DEV102")
    hits = find_conflicts(db_session, (Draft, Schedule), proposal)

    assert [(hit.reason, hit.collection, hit.record_id) for hit in hits] == [
        (ConflictReason.group, "draft", draft.id),
        (ConflictReason.room, "schedule", schedule.id),
    ]
    assert find_conflicts(db_session, (Schedule,), proposal)[0].collection == "schedule"


def test_partial_proposal_only_checks_supplied_fields(db_session):
    db_session.add(_record(Schedule))
    db_session.commit()

    assert has_conflict(db_session, (Schedule,), SlotProposal(day_id=1, slot_id=1, room="Salle 1"))
    assert not has_conflict(db_session, (Schedule,), SlotProposal(day_id=1, slot_id=1, room="Salle 2"))
    assert not has_conflict(db_session, (Schedule,), SlotProposal(day_id=1, slot_id=1))


def test_excluded_ids_are_ignored(db_session):
    schedule = _record(Schedule)
    db_session.add(schedule)
    db_session.commit()

    proposal = SlotProposal.from_record(schedule)
    assert has_conflict(db_session, (Schedule,), proposal)
    assert not has_conflict(db_session, (Schedule,), proposal, exclude_ids={schedule.id})


def test_invalid_coordinate_is_rejected_before_querying(db_session):
    with pytest.raises(InvalidSlotError):
        find_conflicts(db_session, (Schedule,), SlotProposal(day_id=7, slot_id=1, room="Salle 1"))


def test_conflict_error_names_every_reason(db_session):
    db_session.add(_record(Schedule))
    db_session.commit()

    proposal = SlotProposal(day_id=1, slot_id=1, trainer_id="t-alice", room="Salle 1", group_name="DEV101")
    with pytest.raises(ConflictError) as exc_info:
        ensure_no_conflict(db_session, (Schedule,), proposal)

    error = exc_info.value
    assert error.status_code == 400
    assert error.message == "Scheduling conflict on LUNDI 08:30-11:00: trainer, room, group already booked"
    assert error.details["reasons"] == ["trainer", "room", "group"]
    assert len(error.details["conflicts"]) == 3


def test_storage_constraint_rejects_double_booking(db_session):
    db_session.add(_record(Schedule))
    db_session.commit()

    db_session.add(_record(Schedule, trainer_id="t-bob", group_name="DEV102"))
    with pytest.raises(ConflictError) as exc_info:
        commit_or_conflict(db_session, (Schedule,), SlotProposal(day_id=1, slot_id=1, room="Salle 1"))

    assert "LUNDI 08:30-11:00" in exc_info.value.message
    assert exc_info.value.details["reasons"] == ["room"]
    assert exc_info.value.message.endswith("room already booked")
    assert "storage_error" in exc_info.value.details
    assert len(db_session.execute(select(Schedule)).scalars().all()) == 1


def test_conflict_detection_matches_pairwise_rule():
    rng = random.Random(20240611)
    trainers = ["t1", "t2", "t3"]
    rooms = ["Salle 1", "Salle 2", "Salle 3"]
    groups = ["G1", "G2", "G3"]

    for _ in range(500):
        record = _record(
            Schedule,
            trainer_id=rng.choice(trainers),
            room=rng.choice(rooms),
            group_name=rng.choice(groups),
            day_id=rng.randint(1, 6),
            slot_id=rng.randint(1, 4),
        )
        proposal = SlotProposal(
            day_id=rng.randint(1, 6),
            slot_id=rng.randint(1, 4),
            trainer_id=rng.choice(trainers + [None]),
            room=rng.choice(rooms + [None]),
            group_name=rng.choice(groups + [None]),
        )
        same_slot = record.day_id == proposal.day_id and record.slot_id == proposal.slot_id
        shares_resource = (
            record.trainer_id == proposal.trainer_id
            or record.room == proposal.room
            or record.group_name == proposal.group_name
        )
        assert bool(collision_reasons(record, proposal)) == (same_slot and shares_resource)


def test_build_conflict_error_without_hits_keeps_slot_in_message():
    error = build_conflict_error(SlotProposal(day_id=3, slot_id=2), [])
    assert error.message.startswith("Scheduling conflict on MERCREDI 11:00-13:30")
    assert error.details["reasons"] == []


def test_random_insertions_are_rejected_exactly_when_they_collide(db_session):
    rng = random.Random(7)
    accepted: list[dict] = []

    for _ in range(150):
        candidate = {
            "trainer_id": rng.choice(["t1", "t2", "t3", "t4"]),
            "room": rng.choice(["Salle 1", "Salle 2", "Salle 3"]),
            "group_name": rng.choice(["G1", "G2", "G3", "G4"]),
            "day_id": rng.randint(1, 2),
            "slot_id": rng.randint(1, 2),
        }
        expected_clash = any(
            existing["day_id"] == candidate["day_id"]
            and existing["slot_id"] == candidate["slot_id"]
            and any(existing[key] == candidate[key] for key in ("trainer_id", "room", "group_name"))
            for existing in accepted
        )
        proposal = SlotProposal(**candidate)

        if expected_clash:
            with pytest.raises(ConflictError):
                ensure_no_conflict(db_session, (Schedule,), proposal)
            continue

        ensure_no_conflict(db_session, (Schedule,), proposal)
        db_session.add(_record(Schedule, **candidate))
        db_session.commit()
        accepted.append(candidate)

    assert len(db_session.execute(select(Schedule)).scalars().all()) == len(accepted)
