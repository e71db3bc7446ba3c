import io
import os


def _image(name="photo.png", content=b"\x89PNG\r\n\x1a\nfake"):
    return {"image": (io.BytesIO(content), name, "image/png")}


def test__upload_requires_admin(client):
    resp = client.post("/api/upload", data=_image(), content_type="multipart/form-data")
    assert resp.status_code == 401


def test__upload_and_serve(client, app, auth_headers):
    resp = client.post("/api/upload", data=_image(), content_type="multipart/form-data", headers=auth_headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["filename"].endswith(".png")
    assert body["originalName"] == "photo.png"
    assert body["mimetype"] == "image/png"
    assert body["url"].endswith(f"/uploads/{body['filename']}")
    assert os.path.isfile(os.path.join(app.config["UPLOAD_FOLDER"], body["filename"]))

    served = client.get(f"/uploads/{body['filename']}")
    assert served.status_code == 200
    assert served.data.startswith(b"\x89PNG")
    served.close()


def test__upload_rejects_other_types(client, auth_headers):
    data = {"image": (io.BytesIO(b"%PDF-1.4"), "doc.pdf", "application/pdf")}
    resp = client.post("/api/upload", data=data, content_type="multipart/form-data", headers=auth_headers)
    assert resp.status_code == 400


def test__upload_requires_file(client, auth_headers):
    resp = client.post("/api/upload", data={}, content_type="multipart/form-data", headers=auth_headers)
    assert resp.status_code == 400


def test__upload_too_large(client, app, auth_headers):
    app.config["MAX_CONTENT_LENGTH"] = 1024
    data = _image(content=b"x" * 4096)
    resp = client.post("/api/upload", data=data, content_type="multipart/form-data", headers=auth_headers)
    assert resp.status_code == 413


def test__delete_upload(client, app, auth_headers):
    body = client.post(
        "/api/upload", data=_image(), content_type="multipart/form-data", headers=auth_headers
    ).get_json()

    resp = client.delete(f"/api/upload/{body['filename']}", headers=auth_headers)
    assert resp.status_code == 200
    assert not os.path.exists(os.path.join(app.config["UPLOAD_FOLDER"], body["filename"]))
    assert client.delete(f"/api/upload/{body['filename']}", headers=auth_headers).status_code == 404


def test__delete_upload_rejects_traversal(client, auth_headers):
    resp = client.delete("/api/upload/evil..png", headers=auth_headers)
    assert resp.status_code == 400


def test__stored_extension_follows_mimetype(client, app, auth_headers):
    data = {"image": (io.BytesIO(b"\xff\xd8\xff\xe0fake"), "holiday.php", "image/jpeg")}
    resp = client.post("/api/upload", data=data, content_type="multipart/form-data", headers=auth_headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["filename"].endswith(".jpg")
    assert body["originalName"] == "holiday.php"
    assert os.listdir(app.config["UPLOAD_FOLDER"]) == [body["filename"]]
