import uuid

from trainsched.core.security import UserRole, create_access_token


def auth_headers(role: UserRole, subject: str | None = None) -> dict:
    token = create_access_token(subject or str(uuid.uuid4()), role)
    return {"Authorization": f"Bearer {token}"}


def assignment_payload(track_id, trainer="Alice", room="Salle 1", group="DEV101", day=1, slot=1, **extra):
    payload = {
        "trainerName": trainer,
        "salleName": room,
        "groupName": group,
        "filiereId": track_id,
        "dayId": day,
        "slotId": slot,
    }
    payload.update(extra)
    return payload


def create_draft(client, headers, track_id, **kwargs):
    response = client.post("/api/schedules/drafts", json=assignment_payload(track_id, **kwargs), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_schedule(client, headers, track_id, **kwargs):
    response = client.post("/api/schedules", json=assignment_payload(track_id, **kwargs), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
