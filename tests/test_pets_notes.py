from conftest import auth_headers


def _add_pet(api, caller_id="42", **fields):
    pet = {"name": "Mochi", "family": "cat", "gender": 1, "birthTime": 1700000000, "avatar": "", "description": ""}
    pet.update(fields)
    resp = api.post("/api/addPet", json={"pet": pet}, headers=auth_headers(caller_id))
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def _add_note(api, caller_id="42", **fields):
    note = {"content": "first walk", "type": 1, "images": [], "pets": [], "noteTime": 1700000000}
    note.update(fields)
    resp = api.post("/api/addNote", json={"note": note}, headers=auth_headers(caller_id))
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def test_add_and_list_pets_are_scoped_to_caller(api):
    created = _add_pet(api, "42")
    _add_pet(api, "7", name="Rex")

    assert created["id"]
    assert created["ownerId"] == "42"
    assert created["birthTime"] == 1700000000
    assert created["createTime"] > 0

    listing = api.get("/api/getPetList", headers=auth_headers("42")).json()["data"]
    assert [p["name"] for p in listing] == ["Mochi"]


def test_owner_in_body_is_ignored(api):
    created = _add_pet(api, "42", ownerId="7")

    assert created["ownerId"] == "42"


def test_update_pet(api):
    created = _add_pet(api, "42")

    resp = api.post(
        "/api/updatePet",
        json={"pet": {"id": created["id"], "name": "Mochi II", "family": "cat"}},
        headers=auth_headers("42"),
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["name"] == "Mochi II"
    assert data["updateTime"] > 0


def test_update_pet_requires_id(api):
    resp = api.post("/api/updatePet", json={"pet": {"name": "x"}}, headers=auth_headers("42"))

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_PET_ID"


def test_update_pet_of_other_caller_is_not_found(api):
    created = _add_pet(api, "42")

    resp = api.post("/api/updatePet", json={"pet": {"id": created["id"], "name": "x"}}, headers=auth_headers("7"))

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "PET_NOT_FOUND"


def test_delete_pet_releases_ownership(api):
    created = _add_pet(api, "42")

    resp = api.post("/api/deletePet", json={"petId": created["id"]}, headers=auth_headers("42"))
    assert resp.json() == {"data": True}
    assert api.get("/api/getPetList", headers=auth_headers("42")).json()["data"] == []

    again = api.post("/api/deletePet", json={"petId": created["id"]}, headers=auth_headers("42"))
    assert again.status_code == 404


def test_released_owner_id_cannot_authenticate(api):
    resp = api.get("/api/getPetList", headers=auth_headers("0"))

    assert resp.status_code == 401


def test_note_list_is_newest_first(api):
    _add_note(api, "42", content="old", noteTime=100)
    _add_note(api, "42", content="new", noteTime=200)
    _add_note(api, "7", content="someone else", noteTime=300)

    listing = api.get("/api/getNoteList", headers=auth_headers("42")).json()["data"]
    assert [n["content"] for n in listing] == ["new", "old"]


def test_add_note_keeps_image_and_pet_lists(api):
    images = ["https://pet-journal-test.oss-cn-hangzhou.aliyuncs.com/pet-note/42/a.jpg"]
    created = _add_note(api, "42", images=images, pets=[1, 2])

    assert created["images"] == images
    assert created["pets"] == [1, 2]
    assert created["ownerId"] == "42"


def test_delete_note_removes_images_under_caller_prefix(api, oss_spy):
    images = [
        "https://pet-journal-test.oss-cn-hangzhou.aliyuncs.com/pet-note/42/a.jpg",
        "https://pet-journal-test.oss-cn-hangzhou.aliyuncs.com/pet-note/42/b.jpg",
    ]
    created = _add_note(api, "42", images=images)

    resp = api.post("/api/deleteNote", json={"noteId": created["id"]}, headers=auth_headers("42"))

    assert resp.json() == {"data": True}
    assert oss_spy.delete_object.call_count == 2
    for call in oss_spy.delete_object.call_args_list:
        assert call.kwargs["allowed_prefix"] == "pet-note/42/"
    assert api.get("/api/getNoteList", headers=auth_headers("42")).json()["data"] == []


def test_note_without_time_sorts_last(api):
    _add_note(api, "42", content="undated", noteTime=None)
    _add_note(api, "42", content="dated", noteTime=100)

    listing = api.get("/api/getNoteList", headers=auth_headers("42")).json()["data"]
    assert [n["content"] for n in listing] == ["dated", "undated"]


def test_delete_note_requires_id(api, oss_spy):
    resp = api.post("/api/deleteNote", json={}, headers=auth_headers("42"))

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_NOTE_ID"
    oss_spy.delete_object.assert_not_called()


def test_delete_pet_requires_id(api):
    resp = api.post("/api/deletePet", json={}, headers=auth_headers("42"))

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_PET_ID"


def test_delete_note_of_other_caller_is_not_found(api, oss_spy):
    created = _add_note(api, "42", images=["pet-note/42/a.jpg"])

    resp = api.post("/api/deleteNote", json={"noteId": created["id"]}, headers=auth_headers("7"))

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOTE_NOT_FOUND"
    oss_spy.delete_object.assert_not_called()


def test_crud_requires_bearer_token(api):
    assert api.get("/api/getNoteList").status_code == 401
    assert api.post("/api/addPet", json={"pet": {"name": "x"}}).status_code == 401
