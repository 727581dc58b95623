import json

import pytest

from app.models.actor import Actor
from app.models.movie import MovieActor

PHOTO = ("face.jpg", b"jpeg bytes", "image/jpeg")


def create_actor(client, files=None, **fields):
    data = {"name": "Ana Torres", "birth_date": "1990-04-12"}
    data.update(fields)
    response = client.post("/api/actors/", data=data, files=files)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_actor_with_photo(client, asset_store):
    body = create_actor(client, files={"photo": PHOTO})

    assert body["name"] == "Ana Torres"
    assert body["birth_date"] == "1990-04-12"
    assert body["photo"] == asset_store.stored[0]
    assert "/actors/" in body["photo"]


def test_create_actor_strips_markup(client):
    body = create_actor(client, name="<b>Bold</b> Name")

    assert body["name"] == "Bold Name"


def test_create_actor_rejects_script(client):
    response = client.post("/api/actors/", data={"name": "<script>alert(1)</script>"})

    assert response.status_code == 422


def test_create_actor_rejects_html_photo(client, db_session, asset_store):
    response = client.post(
        "/api/actors/",
        data={"name": "Ana Torres"},
        files={"photo": ("face.html", b"<script></script>", "text/html")},
    )

    assert response.status_code == 422
    assert response.json()["details"][0]["field"] == "photo"
    assert asset_store.untouched
    assert db_session.query(Actor).count() == 0


def test_list_actors_is_paginated(client, db_session):
    db_session.add_all([Actor(name=f"Actor {i}") for i in range(7)])
    db_session.commit()

    response = client.get("/api/actors/", params={"page": 2, "page_size": 3})

    assert response.status_code == 200
    assert [a["name"] for a in response.json()] == ["Actor 3", "Actor 4", "Actor 5"]
    assert response.headers["X-Total-Count"] == "7"
    assert response.headers["X-Total-Pages"] == "3"


def test_get_missing_actor(client):
    response = client.get("/api/actors/55")

    assert response.status_code == 404
    assert response.json()["details"] == {"resource": "Actor", "id": 55}


def test_update_actor_replaces_photo(client, asset_store):
    actor = create_actor(client, files={"photo": PHOTO})

    response = client.put(
        f"/api/actors/{actor['id']}",
        data={"name": "Ana T."},
        files={"photo": ("new.webp", b"webp", "image/webp")},
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Ana T."
    assert response.json()["birth_date"] is None
    assert asset_store.replaced == [actor["photo"]]
    assert asset_store.deleted == [actor["photo"]]
    assert response.json()["photo"].endswith(".webp")


def test_update_actor_without_photo_keeps_it(client, asset_store):
    actor = create_actor(client, files={"photo": PHOTO})

    response = client.put(f"/api/actors/{actor['id']}", data={"name": "Renamed"})

    assert response.json()["photo"] == actor["photo"]
    assert asset_store.replaced == []


def test_update_missing_actor_does_not_upload(client, asset_store):
    response = client.put("/api/actors/404", data={"name": "Ghost"}, files={"photo": PHOTO})

    assert response.status_code == 404
    assert asset_store.untouched


def test_patch_actor_birth_date(client):
    actor = create_actor(client)

    response = client.patch(
        f"/api/actors/{actor['id']}",
        json=[
            {"op": "test", "path": "/name", "value": "Ana Torres"},
            {"op": "replace", "path": "/birth_date", "value": "1991-01-01"},
        ],
    )

    assert response.status_code == 200
    assert response.json()["birth_date"] == "1991-01-01"
    assert response.json()["name"] == "Ana Torres"


def test_patch_actor_failed_test_op(client):
    actor = create_actor(client)

    response = client.patch(
        f"/api/actors/{actor['id']}",
        json=[
            {"op": "test", "path": "/name", "value": "Someone else"},
            {"op": "replace", "path": "/name", "value": "Changed"},
        ],
    )

    assert response.status_code == 422
    assert client.get(f"/api/actors/{actor['id']}").json()["name"] == "Ana Torres"


def test_patch_actor_invalid_date(client):
    actor = create_actor(client)

    response = client.patch(
        f"/api/actors/{actor['id']}",
        json=[{"op": "replace", "path": "/birth_date", "value": "not-a-date"}],
    )

    assert response.status_code == 422
    assert response.json()["details"][0]["field"] == "birth_date"


def test_delete_actor_compacts_casts(client, db_session, asset_store):
    ana = create_actor(client, name="Ana", files={"photo": PHOTO})
    bob = create_actor(client, name="Bob")
    cleo = create_actor(client, name="Cleo")
    cast = json.dumps([{"actor_id": a["id"]} for a in (ana, bob, cleo)])
    movie = client.post("/api/movies/", data={"title": "Trio", "actors": cast}).json()

    response = client.delete(f"/api/actors/{ana['id']}")

    assert response.status_code == 204
    assert asset_store.deleted == [ana["photo"]]
    db_session.expire_all()
    rows = db_session.query(MovieActor).filter(MovieActor.movie_id == movie["id"]).all()
    assert {row.actor_id: row.cast_order for row in rows} == {bob["id"]: 0, cleo["id"]: 1}


@pytest.mark.parametrize("actor_id", [0, 999])
def test_delete_missing_actor(client, actor_id):
    assert client.delete(f"/api/actors/{actor_id}").status_code == 404
