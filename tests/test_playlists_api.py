from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

from app.models.playlist import Playlist

OWNER_HEADERS = {"X-User-Id": "user_owner"}
OTHER_HEADERS = {"X-User-Id": "user_other"}


def _create(client, name: str = "Road Trip", *, private: bool = False, headers=OWNER_HEADERS) -> dict:
    response = client.post("/playlists", json={"name": name, "private": private}, headers=headers)
    assert response.status_code == 201
    return response.json()["data"]


def test_health(client) -> None:
    assert client.get("/health").json() == {"ok": True}


def test_requests_without_identity_are_rejected(client) -> None:
    response = client.post("/playlists", json={"name": "x", "private": False})

    assert response.status_code == 401
    assert response.json() == {"status": False, "message": "Unauthorized access", "data": {}}

    assert client.get(f"/playlists/{uuid.uuid4()}/songs").status_code == 401


def test_create_returns_camel_case_envelope(client) -> None:
    response = client.post(
        "/playlists",
        json={"name": "Road Trip", "description": "long drive", "private": False},
        headers=OWNER_HEADERS,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] is True
    assert body["message"] == "Playlist created successfully"
    data = body["data"]
    assert data["userId"] == "user_owner"
    assert data["name"] == "Road Trip"
    assert data["description"] == "long drive"
    assert data["private"] is False
    assert data["isArchived"] is False
    assert data["archivedAt"] is None
    assert data["image"] is None
    assert data["color"] is None
    assert data["songCount"] == 0


def test_invalid_payload_is_400_with_details(client) -> None:
    response = client.post("/playlists", json={"name": "   "}, headers=OWNER_HEADERS)

    assert response.status_code == 400
    body = response.json()
    assert body["status"] is False
    assert body["message"] == "Invalid request data"
    fields = {tuple(error["loc"])[-1] for error in body["data"]}
    assert {"name", "private"} <= fields


def test_malformed_identifier_is_400(client) -> None:
    response = client.get("/playlists/not-a-uuid", headers=OWNER_HEADERS)

    assert response.status_code == 400
    assert response.json()["status"] is False


def test_get_one_is_opaque_404_for_other_users(client) -> None:
    playlist = _create(client, private=True)

    assert client.get(f"/playlists/{playlist['id']}", headers=OWNER_HEADERS).status_code == 200
    response = client.get(f"/playlists/{playlist['id']}", headers=OTHER_HEADERS)
    assert response.status_code == 404
    assert response.json() == {"status": False, "message": "Playlist not found", "data": {}}


def test_update_and_list(client) -> None:
    playlist = _create(client, "Before")

    response = client.patch(
        f"/playlists/{playlist['id']}",
        json={"name": "After", "private": True},
        headers=OWNER_HEADERS,
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Playlist updated successfully"

    listed = client.get("/playlists", headers=OWNER_HEADERS).json()["data"]
    assert [(item["name"], item["private"], item["songCount"]) for item in listed] == [
        ("After", True, 0)
    ]
    assert client.get("/playlists", headers=OTHER_HEADERS).json()["data"] == []


def test_membership_flow_updates_cover(client, make_song) -> None:
    playlist = _create(client)
    first = make_song("first", image="first.jpg", color="#111111")
    second = make_song("second", image="second.jpg", color="#222222")

    for song in (first, second):
        response = client.post(
            f"/playlists/{playlist['id']}/songs/{song.id}", headers=OWNER_HEADERS
        )
        assert response.status_code == 201
        assert response.json()["message"] == "Song added to playlist successfully"

    data = client.get(f"/playlists/{playlist['id']}", headers=OWNER_HEADERS).json()["data"]
    assert (data["image"], data["color"], data["songCount"]) == ("first.jpg", "#111111", 2)

    existing = client.get(
        f"/playlists/{playlist['id']}/existing-songs", headers=OWNER_HEADERS
    ).json()["data"]
    assert set(existing) == {str(first.id), str(second.id)}

    response = client.delete(
        f"/playlists/{playlist['id']}/songs/{first.id}", headers=OWNER_HEADERS
    )
    assert response.status_code == 200
    assert response.json()["status"] is True

    data = client.get(f"/playlists/{playlist['id']}", headers=OWNER_HEADERS).json()["data"]
    assert (data["image"], data["color"]) == ("second.jpg", "#222222")

    all_songs = client.get(
        f"/playlists/{playlist['id']}/all-songs", headers=OWNER_HEADERS
    ).json()["data"]
    assert [song["id"] for song in all_songs] == [str(second.id)]
    assert all_songs[0]["album"]["color"] == "#222222"
    assert all_songs[0]["artists"][0]["name"] == "second artist"


def test_add_missing_song_is_404(client) -> None:
    playlist = _create(client)

    response = client.post(
        f"/playlists/{playlist['id']}/songs/{uuid.uuid4()}", headers=OWNER_HEADERS
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Song not found"


def test_removing_non_member_is_generic_500(client, make_song) -> None:
    playlist = _create(client)
    song = make_song("never added")

    response = client.delete(
        f"/playlists/{playlist['id']}/songs/{song.id}", headers=OWNER_HEADERS
    )

    assert response.status_code == 500
    assert response.json() == {"status": False, "message": "Internal Server Error", "data": {}}


def test_bulk_add(client, make_song) -> None:
    playlist = _create(client)
    s5 = make_song("s5", image="s5.jpg", color="#555555")
    s9 = make_song("s9", image="s9.jpg", color="#999999")

    response = client.post(
        "/playlists/songs",
        json={"playlistId": playlist["id"], "songIds": [str(s5.id), str(s9.id)]},
        headers=OWNER_HEADERS,
    )
    assert response.status_code == 201
    assert response.json()["message"] == "Songs added to playlist successfully"

    data = client.get(f"/playlists/{playlist['id']}", headers=OWNER_HEADERS).json()["data"]
    assert (data["image"], data["songCount"]) == ("s5.jpg", 2)

    empty = client.post(
        "/playlists/songs",
        json={"playlistId": playlist["id"], "songIds": []},
        headers=OWNER_HEADERS,
    )
    assert empty.status_code == 400


def test_paginated_songs_response_shape(client, make_song) -> None:
    playlist = _create(client)
    songs = [make_song(f"track {index}", image=f"{index}.jpg") for index in range(12)]
    for song in songs:
        client.post(f"/playlists/{playlist['id']}/songs/{song.id}", headers=OWNER_HEADERS)

    first = client.get(f"/playlists/{playlist['id']}/songs", headers=OTHER_HEADERS)
    assert first.status_code == 200
    body = first.json()
    assert set(body) == {"items", "nextCursor"}
    assert len(body["items"]) == 10
    assert body["items"][0]["songId"] == str(songs[-1].id)
    assert body["items"][0]["song"]["title"] == "track 11"
    assert body["nextCursor"] == body["items"][-1]["id"]

    second = client.get(
        f"/playlists/{playlist['id']}/songs",
        params={"cursor": body["nextCursor"]},
        headers=OTHER_HEADERS,
    ).json()
    assert [item["songId"] for item in second["items"]] == [str(songs[1].id), str(songs[0].id)]
    assert second["nextCursor"] is None


def test_paginated_songs_of_private_playlist_is_403_for_others(client) -> None:
    playlist = _create(client, private=True)

    assert client.get(f"/playlists/{playlist['id']}/songs", headers=OWNER_HEADERS).status_code == 200
    response = client.get(f"/playlists/{playlist['id']}/songs", headers=OTHER_HEADERS)
    assert response.status_code == 403
    assert response.json() == {"status": False, "message": "Unauthorized Access", "data": {}}


def test_archive_list_and_restore(client) -> None:
    playlist = _create(client)

    response = client.delete(f"/playlists/{playlist['id']}", headers=OWNER_HEADERS)
    assert response.status_code == 200
    assert response.json()["message"] == "Playlist deleted successfully"
    assert client.get(f"/playlists/{playlist['id']}", headers=OWNER_HEADERS).status_code == 404

    archived = client.post("/playlists/archived", headers=OWNER_HEADERS).json()["data"]
    assert [item["id"] for item in archived] == [playlist["id"]]
    assert archived[0]["isArchived"] is True
    assert archived[0]["archivedAt"] is not None

    response = client.patch(f"/playlists/{playlist['id']}/restore", headers=OWNER_HEADERS)
    assert response.status_code == 200
    assert response.json()["message"] == "Playlist restored successfully"
    assert client.get(f"/playlists/{playlist['id']}", headers=OWNER_HEADERS).status_code == 200


def test_restore_after_grace_window_is_410_and_final(client, session_factory) -> None:
    playlist = _create(client)
    client.delete(f"/playlists/{playlist['id']}", headers=OWNER_HEADERS)
    with session_factory() as session:
        stored = session.get(Playlist, uuid.UUID(playlist["id"]))
        stored.archived_at = datetime.now(timezone.utc) - timedelta(days=120)
        session.commit()

    response = client.patch(f"/playlists/{playlist['id']}/restore", headers=OWNER_HEADERS)
    assert response.status_code == 410
    assert response.json() == {
        "status": False,
        "message": "Cannot restore this playlist",
        "data": {},
    }

    again = client.patch(f"/playlists/{playlist['id']}/restore", headers=OWNER_HEADERS)
    assert again.status_code == 404
    assert client.post("/playlists/archived", headers=OWNER_HEADERS).json()["data"] == []


def test_unexpected_failure_is_logged_with_operation_tag(client, make_song, caplog) -> None:
    playlist = _create(client)
    song = make_song("never added")

    with caplog.at_level(logging.ERROR, logger="app.core.errors"):
        response = client.delete(
            f"/playlists/{playlist['id']}/songs/{song.id}", headers=OWNER_HEADERS
        )

    assert response.status_code == 500
    assert "REMOVE PLAYLIST SONG API ERROR" in caplog.text
    assert str(song.id) not in response.text


def test_private_flag_must_be_a_real_boolean(client) -> None:
    response = client.post(
        "/playlists", json={"name": "Loose", "private": "yes"}, headers=OWNER_HEADERS
    )

    assert response.status_code == 400
    assert client.get("/playlists", headers=OWNER_HEADERS).json()["data"] == []
