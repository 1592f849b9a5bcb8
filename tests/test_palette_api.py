"""
API integration tests for PaletteLab endpoints.

Tests the complete HTTP surface:
- palette extraction via multipart upload and base64 JSON
- luminosity analysis
- color tools (harmonies, variations)
- palette library CRUD and metrics
"""

import pytest

from conftest import encode_png, make_rgba, to_b64
from main import app
from palettelab.api.v1 import get_library
from palettelab.config import config
from palettelab.services.colors import FALLBACK_PALETTE
from palettelab.services.library import PaletteLibrary


def _upload(data, content_type="image/png"):
    return {"file": ("image.png", data, content_type)}


@pytest.fixture
def fresh_library():
    library = PaletteLibrary()
    app.dependency_overrides[get_library] = lambda: library
    yield library
    app.dependency_overrides.pop(get_library, None)


class TestPaletteUpload:
    """Test POST /v1/palette"""

    def test_solid_red(self, test_client, solid_red_png):
        response = test_client.post("/v1/palette?color_count=5&method=kmeans", files=_upload(solid_red_png))

        assert response.status_code == 200
        data = response.json()
        assert data["colors"] == ["#FF0000"] * 5
        assert data["method"] == "kmeans"
        assert data["color_count"] == 5
        assert data["fallback_used"] is False
        assert data["sampled_pixels"] > 0
        assert data["request_id"].startswith("pal-")
        assert data["histogram"] is None

    def test_histogram_method_with_luminosity(self, test_client, two_tone_png):
        response = test_client.post(
            "/v1/palette?color_count=3&method=histogram&include_histogram=true",
            files=_upload(two_tone_png)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["colors"] == ["#FF0000", "#0000FF", "#0000FF"]
        assert len(data["histogram"]["bins"]) == 32
        assert max(data["histogram"]["bins"]) == 100

    def test_transparent_uses_fallback(self, test_client, transparent_png):
        response = test_client.post("/v1/palette?include_histogram=true", files=_upload(transparent_png))

        assert response.status_code == 200
        data = response.json()
        assert data["fallback_used"] is True
        assert data["colors"] == list(FALLBACK_PALETTE[:config.DEFAULT_COLOR_COUNT])
        assert data["histogram"] is None

    @pytest.mark.parametrize("image", ["oversized_png", "truncated_png"])
    def test_rejected_by_decoder_uses_fallback(self, test_client, request, image):
        data = request.getfixturevalue(image)
        response = test_client.post("/v1/palette?color_count=3&include_histogram=true", files=_upload(data))

        assert response.status_code == 200
        body = response.json()
        assert body["fallback_used"] is True
        assert body["colors"] == list(FALLBACK_PALETTE[:3])
        assert body["histogram"] is None

    @pytest.mark.parametrize("query", ["color_count=2", "color_count=9", "method=median"])
    def test_invalid_parameters(self, test_client, solid_red_png, query):
        response = test_client.post(f"/v1/palette?{query}", files=_upload(solid_red_png))
        assert response.status_code == 422

    def test_unsupported_media_type(self, test_client, solid_red_png):
        response = test_client.post("/v1/palette", files=_upload(solid_red_png, "text/plain"))
        assert response.status_code == 415

    def test_not_an_image(self, test_client):
        response = test_client.post("/v1/palette", files=_upload(b"this is plainly not an image"))
        assert response.status_code == 400

    def test_too_large(self, test_client, solid_red_png, monkeypatch):
        monkeypatch.setattr(config, "MAX_FILE_MB", 0)
        response = test_client.post("/v1/palette", files=_upload(solid_red_png))
        assert response.status_code == 413

    def test_large_image_downscaled(self, test_client):
        png = encode_png(make_rgba(400, 200, (20, 40, 60)))
        response = test_client.post("/v1/palette?color_count=3", files=_upload(png))

        data = response.json()
        # 150x75 after downscaling, every 4th of 11250 pixels sampled
        assert data["sampled_pixels"] == 2813
        assert data["colors"] == ["#14283C"] * 3


class TestPaletteBase64:
    """Test POST /v1/palette/base64"""

    def test_base64_payload(self, test_client, solid_red_png):
        response = test_client.post("/v1/palette/base64?color_count=4", json={"image_b64": to_b64(solid_red_png)})

        assert response.status_code == 200
        assert response.json()["colors"] == ["#FF0000"] * 4

    def test_data_url_payload(self, test_client, solid_red_png):
        payload = {"image_b64": f"data:image/png;base64,{to_b64(solid_red_png)}"}
        response = test_client.post("/v1/palette/base64", json=payload)
        assert response.status_code == 200

    def test_invalid_base64(self, test_client):
        response = test_client.post("/v1/palette/base64", json={"image_b64": "%%%not-base64%%%"})
        assert response.status_code == 400

    def test_missing_payload(self, test_client):
        response = test_client.post("/v1/palette/base64", json={})
        assert response.status_code == 422


class TestLuminosity:
    """Test POST /v1/luminosity"""

    def test_gradient(self, test_client, gradient_png):
        response = test_client.post("/v1/luminosity", files=_upload(gradient_png))

        assert response.status_code == 200
        histogram = response.json()["histogram"]
        assert len(histogram["bins"]) == 32
        assert 0 <= histogram["contrast"] <= 100

    @pytest.mark.parametrize("image", ["oversized_png", "truncated_png"])
    def test_rejected_by_decoder_is_null(self, test_client, request, image):
        response = test_client.post("/v1/luminosity", files=_upload(request.getfixturevalue(image)))

        assert response.status_code == 200
        assert response.json()["histogram"] is None

    def test_transparent_is_null(self, test_client, transparent_png):
        response = test_client.post("/v1/luminosity/base64", json={"image_b64": to_b64(transparent_png)})

        assert response.status_code == 200
        assert response.json()["histogram"] is None


class TestColorTools:
    """Test harmony and variation endpoints"""

    def test_harmonies(self, test_client):
        response = test_client.get("/v1/colors/ff0000/harmonies")

        assert response.status_code == 200
        data = response.json()
        assert data["base_hex"] == "#FF0000"
        assert len(data["harmonies"]) == 5

    def test_harmonies_invalid_hex(self, test_client):
        assert test_client.get("/v1/colors/nothex/harmonies").status_code == 400

    def test_variations(self, test_client):
        response = test_client.get("/v1/colors/808080/variations?use_hue_shift=true")

        assert response.status_code == 200
        data = response.json()
        assert data["use_hue_shift"] is True
        assert [v["label"] for v in data["variations"]] == ["S2", "S1", "Base", "L1", "L2"]


class TestLibraryApi:
    """Test /v1/library CRUD"""

    def test_save_list_delete(self, test_client, fresh_library):
        response = test_client.post("/v1/library", json={"colors": ["#ff0000", "#00ff00", "#0000ff"], "name": "RGB"})
        assert response.status_code == 201
        saved = response.json()
        assert saved["colors"] == ["#FF0000", "#00FF00", "#0000FF"]

        listing = test_client.get("/v1/library").json()
        assert [p["id"] for p in listing] == [saved["id"]]

        assert test_client.delete(f"/v1/library/{saved['id']}").status_code == 204
        assert test_client.delete(f"/v1/library/{saved['id']}").status_code == 404
        assert test_client.get("/v1/library").json() == []

    def test_invalid_color(self, test_client, fresh_library):
        response = test_client.post("/v1/library", json={"colors": ["#XYZXYZ"]})
        assert response.status_code == 400


class TestMetricsApi:
    """Test GET /v1/metrics"""

    def test_counters_after_extraction(self, test_client, solid_red_png, transparent_png):
        test_client.post("/v1/palette", files=_upload(solid_red_png))
        test_client.post("/v1/palette", files=_upload(transparent_png))

        data = test_client.get("/v1/metrics").json()
        assert data["counters"]["palette_extract_requests_total"] == 2
        assert data["counters"]["palette_extract_fallback_total"] == 1
        assert "palette_extract_duration_ms" in data["timing_stats"]
        assert data["fallback_rate"] == pytest.approx(0.5)
        assert data["sampled_pixel_stats"]["count"] == 1
