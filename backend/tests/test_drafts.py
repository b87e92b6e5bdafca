import uuid

from helpers import assignment_payload, create_draft

DRAFTS_URL = "/api/schedules/drafts"


def test_create_draft_returns_display_projection(client, admin_headers, reference_data):
    track_id = reference_data["track"]["id"]
    body = create_draft(client, admin_headers, track_id, day=3, slot=2)

    assert body["trainer"]["name"] == "Alice"
    assert body["track"] == {"id": track_id, "name": "DEV"}
    assert body["room"] == "Salle 1"
    assert body["group"] == "DEV101"
    assert (body["dayId"], body["day"]) == (3, "MERCREDI")
    assert (body["slotId"], body["startTime"], body["endTime"]) == (2, "11:00", "13:30")
    assert body["module"] is None


def test_room_collision_is_rejected(client, admin_headers, reference_data):
    track_id = reference_data["track"]["id"]
    create_draft(client, admin_headers, track_id, trainer="Alice", room="Salle 1", group="DEV101")

    response = client.post(
        DRAFTS_URL,
        json=assignment_payload(track_id, trainer="Bob", room="Salle 1", group="DEV102"),
        headers=admin_headers,
    )
    assert response.status_code == 400
    payload = response.json()
    assert payload["details"]["reasons"] == ["room"]
    assert payload["details"]["conflicts"][0]["collection"] == "draft"
    assert "room already booked" in payload["message"]

    other_slot = client.post(
        DRAFTS_URL,
        json=assignment_payload(track_id, trainer="Bob", room="Salle 1", group="DEV102", slot=2),
        headers=admin_headers,
    )
    assert other_slot.status_code == 201


def test_draft_collides_with_confirmed_schedule(client, admin_headers, reference_data):
    track_id = reference_data["track"]["id"]
    response = client.post("/api/schedules", json=assignment_payload(track_id), headers=admin_headers)
    assert response.status_code == 201

    draft = client.post(
        DRAFTS_URL,
        json=assignment_payload(track_id, room="Salle 2", group="DEV102"),
        headers=admin_headers,
    )
    assert draft.status_code == 400
    assert draft.json()["details"]["reasons"] == ["trainer"]
    assert draft.json()["details"]["conflicts"][0]["collection"] == "schedule"


def test_invalid_input_is_rejected_before_any_write(client, admin_headers, reference_data):
    track_id = reference_data["track"]["id"]
    cases = [
        (assignment_payload(track_id, day=7), 400),
        (assignment_payload(track_id, slot=0), 400),
        ({"trainerName": "Alice", "salleName": "Salle 1"}, 400),
        (assignment_payload("not-a-uuid"), 400),
        (assignment_payload(track_id, group="OPS101"), 400),
        (assignment_payload(track_id, moduleName="Docker"), 400),
        (assignment_payload(track_id, moduleTrainerId=reference_data["trainers"]["Bob"]["id"]), 400),
        (assignment_payload(track_id, trainer="Zed"), 404),
        (assignment_payload(track_id, room="Salle 9"), 404),
        (assignment_payload(str(uuid.uuid4())), 404),
    ]
    for payload, expected in cases:
        response = client.post(DRAFTS_URL, json=payload, headers=admin_headers)
        assert response.status_code == expected, (payload, response.text)
        assert "message" in response.json()

    assert client.get(DRAFTS_URL, headers=admin_headers).json() == []


def test_boolean_day_and_slot_are_rejected(client, admin_headers, reference_data):
    track_id = reference_data["track"]["id"]
    for payload in (assignment_payload(track_id, day=True), assignment_payload(track_id, slot=True)):
        response = client.post(DRAFTS_URL, json=payload, headers=admin_headers)
        assert response.status_code == 400, response.text

    assert client.get(DRAFTS_URL, headers=admin_headers).json() == []

    draft = create_draft(client, admin_headers, track_id)
    moved = client.put(
        f"{DRAFTS_URL}/{draft['id']}",
        json=assignment_payload(track_id, day=True, trainerId=reference_data["trainers"]["Alice"]["id"]),
        headers=admin_headers,
    )
    assert moved.status_code == 400
    assert client.get(f"{DRAFTS_URL}/{draft['id']}", headers=admin_headers).json()["dayId"] == 1


def test_module_trainer_defaults_to_slot_trainer(client, admin_headers, reference_data):
    track_id = reference_data["track"]["id"]
    bob_id = reference_data["trainers"]["Bob"]["id"]

    default = create_draft(client, admin_headers, track_id, moduleName="Python")
    assert default["module"]["name"] == "Python"
    assert default["module"]["trainer"]["name"] == "Alice"

    delegated = create_draft(
        client,
        admin_headers,
        track_id,
        trainer="Carol",
        room="Salle 2",
        group="DEV102",
        moduleName="SQL",
        moduleTrainerId=bob_id,
    )
    assert delegated["trainer"]["name"] == "Carol"
    assert delegated["module"]["trainer"] == {"id": bob_id, "name": "Bob"}


def test_update_draft_excludes_itself_from_conflicts(client, admin_headers, reference_data):
    track_id = reference_data["track"]["id"]
    alice_id = reference_data["trainers"]["Alice"]["id"]
    draft = create_draft(client, admin_headers, track_id)

    payload = assignment_payload(track_id, slot=3, trainerId=alice_id)
    response = client.put(f"{DRAFTS_URL}/{draft['id']}", json=payload, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["slotId"] == 3
    assert response.json()["id"] == draft["id"]

    unchanged = client.put(f"{DRAFTS_URL}/{draft['id']}", json=payload, headers=admin_headers)
    assert unchanged.status_code == 200


def test_update_draft_rejects_collision_with_another_draft(client, admin_headers, reference_data):
    track_id = reference_data["track"]["id"]
    bob_id = reference_data["trainers"]["Bob"]["id"]
    create_draft(client, admin_headers, track_id)
    other = create_draft(client, admin_headers, track_id, trainer="Bob", room="Salle 2", group="DEV102", slot=2)

    response = client.put(
        f"{DRAFTS_URL}/{other['id']}",
        json=assignment_payload(track_id, trainer="Bob", room="Salle 1", group="DEV102", slot=1, trainerId=bob_id),
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["details"]["reasons"] == ["room"]

    kept = client.get(f"{DRAFTS_URL}/{other['id']}", headers=admin_headers)
    assert kept.json()["room"] == "Salle 2"


def test_update_draft_rejects_mismatched_trainer_name(client, admin_headers, reference_data):
    track_id = reference_data["track"]["id"]
    alice_id = reference_data["trainers"]["Alice"]["id"]
    draft = create_draft(client, admin_headers, track_id)

    response = client.put(
        f"{DRAFTS_URL}/{draft['id']}",
        json=assignment_payload(track_id, trainer="Bob", trainerId=alice_id),
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "trainerName does not match trainerId"


def test_delete_draft(client, admin_headers, reference_data):
    draft = create_draft(client, admin_headers, reference_data["track"]["id"])

    response = client.delete(f"{DRAFTS_URL}/{draft['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {}}

    assert client.get(f"{DRAFTS_URL}/{draft['id']}", headers=admin_headers).status_code == 404
    assert client.delete(f"{DRAFTS_URL}/{draft['id']}", headers=admin_headers).status_code == 404
    assert client.delete(f"{DRAFTS_URL}/not-an-id", headers=admin_headers).status_code == 400


def test_list_drafts_hides_dangling_references(client, admin_headers, reference_data):
    track_id = reference_data["track"]["id"]
    create_draft(client, admin_headers, track_id)
    bob_draft = create_draft(client, admin_headers, track_id, trainer="Bob", room="Salle 2", group="DEV102")

    deleted = client.delete(f"/api/trainers/{reference_data['trainers']['Bob']['id']}", headers=admin_headers)
    assert deleted.status_code == 200

    listed = client.get(DRAFTS_URL, headers=admin_headers).json()
    assert [item["trainer"]["name"] for item in listed] == ["Alice"]

    # Single reads fall back to the cached names.
    single = client.get(f"{DRAFTS_URL}/{bob_draft['id']}", headers=admin_headers)
    assert single.status_code == 200
    assert single.json()["trainer"]["name"] == "Bob"
