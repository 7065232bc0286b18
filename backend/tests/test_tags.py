from app.models.tag import Tag, TagAssociation
from tests.conftest import auth_headers, create_entry


def test_no_tags_is_no_content(client):
    resp = client.get("/api/tags")
    assert resp.status_code == 204


def test_tags_listed_by_name(client, seed_users):
    headers = auth_headers(client, "alice")
    create_entry(
        client,
        headers,
        tags=[{"name": "wifi", "classification": "amenity"}, {"name": "food", "classification": "category"}],
    )
    resp = client.get("/api/tags")
    assert resp.status_code == 200, resp.text
    assert resp.json() == [
        {"name": "food", "classification": "category"},
        {"name": "wifi", "classification": "amenity"},
    ]


def test_tag_classification_last_writer_wins(client, db, seed_users):
    headers = auth_headers(client, "alice")
    first = create_entry(client, headers)
    create_entry(client, headers, title="Taqueria", latitude=37.78, tags=[{"name": "food", "classification": "cuisine"}])

    assert client.get("/api/tags").json() == [{"name": "food", "classification": "cuisine"}]
    assert db.query(Tag).count() == 1
    detail = client.get(f"/api/entries/{first['entry_id']}").json()
    assert detail["tags"] == [{"name": "food", "classification": "cuisine"}]


def test_repeated_tag_in_one_request_is_linked_once(client, db, seed_users):
    headers = auth_headers(client, "alice")
    created = create_entry(
        client,
        headers,
        tags=[{"name": " food ", "classification": "category"}, {"name": "food", "classification": "cuisine"}],
    )
    links = db.query(TagAssociation).filter(TagAssociation.entry_revision_id == created["revision_id"]).all()
    assert [link.tag_name for link in links] == ["food"]
    assert db.query(Tag).filter(Tag.name == "food").one().classification == "cuisine"
