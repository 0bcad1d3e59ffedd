import base64
import io

import pytest
from PIL import Image

from app import app, decode_data_url


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def _png(size=(120, 80), dpi=(300, 300)):
    buf = io.BytesIO()
    Image.new("RGB", size, (10, 120, 200)).save(buf, format="PNG", dpi=dpi)
    return buf.getvalue()


def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.get_json() == {"ok": True}


def test_multipart_upload(client):
    data = _png()
    r = client.post(
        "/dpi-check",
        data={"file": (io.BytesIO(data), "design.png", "image/png")},
        content_type="multipart/form-data",
    )
    assert r.status_code == 200
    body = r.get_json()
    assert body["ok"] is True
    assert body["metadata"]["dpi"] == 300
    assert body["metadata"]["width"] == 120
    assert body["metadata"]["declared_format"] == "image/png"
    assert body["metadata"]["file_size_bytes"] == len(data)
    assert body["suggested_use"] in {"web-only", "small-print", "medium-print", "large-print", "commercial-print"}
    assert "placement" not in body


def test_data_url_with_placement(client):
    data_url = "data:image/png;base64," + base64.b64encode(_png()).decode("ascii")
    r = client.post("/dpi-check", json={
        "data_url": data_url,
        "print_width_in": 0.4,
        "print_height_in": "0.4",
    })
    assert r.status_code == 200
    body = r.get_json()
    assert body["metadata"]["declared_format"] == "image/png"
    # min(120 / 0.4, 80 / 0.4)
    assert body["placement"]["dpi"] == 200
    assert body["placement"]["tone"] == "good"
    assert body["placement"]["meets_minimum"] is True
    assert body["placement"]["meets_recommended"] is False


def test_svg_format_override(client):
    data_url = "data:;base64," + base64.b64encode(b"<svg xmlns='http://www.w3.org/2000/svg'/>").decode("ascii")
    r = client.post("/dpi-check", json={"data_url": data_url, "format": "image/svg+xml"})
    body = r.get_json()
    assert body["quality_score"] == 95
    assert body["is_vector"] is True
    assert body["suggested_use"] == "commercial-print"


def test_garbage_degrades_instead_of_failing(client):
    r = client.post("/dpi-check", json={"data_url": "data:image/png;base64,aGVsbG8gd29ybGQ"})
    assert r.status_code == 200
    body = r.get_json()
    assert body["quality_score"] == 30
    assert body["metadata"]["dpi"] == 72
    assert body["suggested_use"] == "web-only"
    assert body["metadata"]["warnings"]


def test_batch_upload(client):
    r = client.post(
        "/dpi-check/batch",
        data={"files": [
            (io.BytesIO(_png()), "a.png", "image/png"),
            (io.BytesIO(b"not an image"), "b.png", "image/png"),
        ]},
        content_type="multipart/form-data",
    )
    assert r.status_code == 200
    results = r.get_json()["results"]
    assert [res["metadata"]["dpi"] for res in results] == [300, 72]
    assert results[1]["quality_score"] == 30


def test_batch_without_files(client):
    r = client.post("/dpi-check/batch", data={}, content_type="multipart/form-data")
    assert r.status_code == 400


def test_no_data(client):
    r = client.post("/dpi-check", json={})
    assert r.status_code == 400
    assert r.get_json() == {"ok": False, "error": "no_data"}


def test_declared_size_override(client):
    data_url = "data:image/png;base64," + base64.b64encode(_png()).decode("ascii")
    r = client.post("/dpi-check", json={"data_url": data_url, "file_size": 123456})
    assert r.get_json()["metadata"]["file_size_bytes"] == 123456


def test_decode_data_url():
    assert decode_data_url("data:image/gif;base64,R0lG\nODlh") == ("image/gif", b"GIF89a")
    assert decode_data_url("R0lGODlh") == ("", b"GIF89a")
    assert decode_data_url("data:broken") == (None, None)
