import io
import os

from app.models import Profile


def png_upload(size=128, mimetype="image/png", name="avatar.png"):
    return {"file": (io.BytesIO(b"\x89PNG" + b"0" * size), name, mimetype)}


def test_get_profile_after_register(auth_client):
    response = auth_client.get("/api/profile")
    assert response.status_code == 200
    user = response.get_json()["user"]
    assert user["email"] == "alvin@example.com"
    assert user["profile"] == {
        "name": "Alvin",
        "headline": None,
        "location": None,
        "bio": None,
        "avatarUrl": None,
    }


def test_patch_profile_trims_and_truncates(auth_client):
    response = auth_client.patch("/api/profile", json={
        "name": "  Alvin Rikardo  ",
        "headline": "x" * 200,
        "bio": "b" * 300,
        "location": 42,
    })
    assert response.status_code == 200
    profile = response.get_json()["user"]["profile"]
    assert profile["name"] == "Alvin Rikardo"
    assert profile["headline"] == "x" * 120
    assert profile["bio"] == "b" * 280
    assert profile["location"] is None


def test_patch_profile_creates_missing_profile(auth_client):
    Profile.query.delete()
    response = auth_client.patch("/api/profile", json={"headline": "Backend engineer"})
    assert response.status_code == 200
    profile = response.get_json()["user"]["profile"]
    assert profile["headline"] == "Backend engineer"
    assert profile["name"] is None
    assert Profile.query.count() == 1


def test_patch_profile_clears_avatar(auth_client):
    auth_client.patch("/api/profile", json={"avatarUrl": "https://cdn.example.com/a.png"})
    response = auth_client.patch("/api/profile", json={"avatarUrl": None})
    assert response.get_json()["user"]["profile"]["avatarUrl"] is None


def test_upload_avatar_stores_file_and_updates_profile(auth_client):
    response = auth_client.post("/api/profile/avatar", data=png_upload(), content_type="multipart/form-data")
    assert response.status_code == 200
    avatar_url = response.get_json()["avatarUrl"]
    assert "/api/uploads/avatars/" in avatar_url
    assert avatar_url.endswith(".png")

    profile = auth_client.get("/api/profile").get_json()["user"]["profile"]
    assert profile["avatarUrl"] == avatar_url

    served = auth_client.get(avatar_url.replace("http://localhost", ""))
    assert served.status_code == 200
    assert served.data.startswith(b"\x89PNG")


def test_upload_avatar_uses_public_base_url(app, auth_client):
    app.config["PUBLIC_BASE_URL"] = "https://cdn.example.com/"
    response = auth_client.post(
        "/api/profile/avatar",
        data=png_upload(mimetype="image/webp", name="a.webp"),
        content_type="multipart/form-data",
    )
    assert response.get_json()["avatarUrl"].startswith("https://cdn.example.com/avatars/")
    assert response.get_json()["avatarUrl"].endswith(".webp")


def test_upload_avatar_validation(auth_client):
    missing = auth_client.post("/api/profile/avatar", data={}, content_type="multipart/form-data")
    assert missing.status_code == 400

    gif = auth_client.post(
        "/api/profile/avatar", data=png_upload(mimetype="image/gif", name="a.gif"), content_type="multipart/form-data"
    )
    assert gif.status_code == 400
    assert gif.get_json()["message"] == "Only PNG/JPG/WEBP allowed"

    too_big = auth_client.post(
        "/api/profile/avatar", data=png_upload(size=2 * 1024 * 1024), content_type="multipart/form-data"
    )
    assert too_big.status_code == 400
    assert too_big.get_json()["message"] == "Max file size is 2MB"


def test_upload_avatar_storage_failure_is_500(app, auth_client, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")
    app.config["UPLOAD_FOLDER"] = os.path.join(str(blocker), "uploads")

    response = auth_client.post("/api/profile/avatar", data=png_upload(), content_type="multipart/form-data")
    assert response.status_code == 500
    assert response.get_json()["message"]
    assert auth_client.get("/api/profile").get_json()["user"]["profile"]["avatarUrl"] is None


def test_upload_over_request_limit_is_a_validation_error(auth_client):
    response = auth_client.post(
        "/api/profile/avatar", data=png_upload(size=5 * 1024 * 1024), content_type="multipart/form-data"
    )
    assert response.status_code == 400
    assert response.get_json()["message"] == "Max file size is 2MB"
    assert auth_client.get("/api/profile").get_json()["user"]["profile"]["avatarUrl"] is None
