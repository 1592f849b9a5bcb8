"""
Test health endpoint for PaletteLab.
"""


def test_health_check(test_client):
    """Health check reports service name and version."""
    response = test_client.get("/healthz")

    assert response.status_code == 200
    data = response.json()

    assert data["ok"] is True
    assert "version" in data
    assert data["service"] == "palettelab"
