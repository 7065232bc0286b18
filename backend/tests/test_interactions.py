import pytest

from app.exceptions import ValidationError
from app.models.interaction import ConversationInteraction, EntryInteraction, TargetKind
from app.services import interaction_service
from tests.conftest import auth_headers, create_entry


def _vote(client, headers, entry_id, interaction_type):
    resp = client.post(f"/api/entries/{entry_id}/vote", json={"interaction_type": interaction_type}, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_upvote_twice_toggles_off(client, seed_users):
    headers = auth_headers(client, "alice")
    entry_id = create_entry(client, headers)["entry_id"]

    assert _vote(client, headers, entry_id, "upvote") == {"upvotes": 1, "downvotes": 0, "user_interaction": "upvote"}
    assert _vote(client, headers, entry_id, "upvote") == {"upvotes": 0, "downvotes": 0, "user_interaction": ""}


def test_upvote_then_downvote_switches(client, db, seed_users):
    headers = auth_headers(client, "alice")
    entry_id = create_entry(client, headers)["entry_id"]

    _vote(client, headers, entry_id, "upvote")
    result = _vote(client, headers, entry_id, "downvote")
    assert result == {"upvotes": 0, "downvotes": 1, "user_interaction": "downvote"}

    rows = db.query(EntryInteraction).filter(EntryInteraction.entry_id == entry_id).all()
    assert len(rows) == 1
    assert rows[0].interaction_type == "downvote"


def test_aggregates_count_each_user_once(client, db, seed_users):
    alice = auth_headers(client, "alice")
    bob = auth_headers(client, "bob")
    entry_id = create_entry(client, alice)["entry_id"]

    _vote(client, alice, entry_id, "upvote")
    _vote(client, bob, entry_id, "downvote")
    _vote(client, bob, entry_id, "upvote")
    result = _vote(client, alice, entry_id, "downvote")

    assert result["upvotes"] == 1
    assert result["downvotes"] == 1
    rows = db.query(EntryInteraction).filter(EntryInteraction.entry_id == entry_id).all()
    assert sorted((row.user_id, row.interaction_type) for row in rows) == [
        (seed_users["alice"].user_id, "downvote"),
        (seed_users["bob"].user_id, "upvote"),
    ]


def test_vote_rejects_unknown_type(client, seed_users):
    headers = auth_headers(client, "alice")
    entry_id = create_entry(client, headers)["entry_id"]
    resp = client.post(f"/api/entries/{entry_id}/vote", json={"interaction_type": "sideways"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["details"]["interaction_type"] == "sideways"


def test_vote_on_missing_entry(client, seed_users):
    resp = client.post("/api/entries/4242/vote", json={"interaction_type": "upvote"}, headers=auth_headers(client, "bob"))
    assert resp.status_code == 404
    assert resp.json()["details"]["entity_type"] == "Entry"


def test_vote_requires_authentication(client, seed_users):
    entry_id = create_entry(client, auth_headers(client, "alice"))["entry_id"]
    resp = client.post(f"/api/entries/{entry_id}/vote", json={"interaction_type": "upvote"})
    assert resp.status_code == 401


def test_ledgers_are_separate_per_target_kind(client, db, seed_users):
    alice = seed_users["alice"]
    headers = auth_headers(client, "alice")
    entry_id = create_entry(client, headers)["entry_id"]
    comment = client.post(
        "/api/comments", json={"entry_id": entry_id, "context": "Nice", "type": "review"}, headers=headers
    ).json()

    interaction_service.vote(db, user_id=alice.user_id, kind=TargetKind.ENTRY, target_id=entry_id, requested="upvote")
    interaction_service.vote(
        db, user_id=alice.user_id, kind=TargetKind.COMMENT, target_id=comment["id"], requested="downvote"
    )

    assert interaction_service.get_aggregate(db, TargetKind.ENTRY, entry_id) == (1, 0)
    assert interaction_service.get_aggregate(db, TargetKind.COMMENT, comment["id"]) == (0, 1)
    assert interaction_service.get_user_state(db, None, TargetKind.ENTRY, entry_id) == ""
    assert db.query(ConversationInteraction).count() == 1
    assert db.query(EntryInteraction).count() == 1


def test_batch_aggregates_default_to_zero(db):
    counts = interaction_service.get_aggregates(db, TargetKind.ENTRY, [1, 2])
    assert counts == {1: (0, 0), 2: (0, 0)}
    assert interaction_service.get_user_states(db, 1, TargetKind.COMMENT, [7]) == {7: ""}


def test_unknown_type_error_hides_enum_lookup(db):
    with pytest.raises(ValidationError) as excinfo:
        interaction_service.vote(db, user_id=1, kind=TargetKind.ENTRY, target_id=1, requested="sideways")
    assert excinfo.value.__cause__ is None
    assert excinfo.value.__suppress_context__ is True
