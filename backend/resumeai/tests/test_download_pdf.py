import json

import pytest

fake_pdf = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF"


@pytest.mark.anyio
async def test_download_pdf(client, fake_gemini, sample_result):
    fake_gemini.text = json.dumps(sample_result)

    sid = (await client.post("/api/sessions")).json()["session_id"]
    files = {"resume": ("test.pdf", fake_pdf, "application/pdf")}
    assert (await client.post(f"/api/sessions/{sid}/document", files=files)).status_code == 200
    await client.patch(f"/api/sessions/{sid}/job", json={"title": "SRE", "description": "AWS Terraform Kubernetes"})

    r = await client.post(f"/api/sessions/{sid}/analyze")
    assert r.status_code == 200, r.text

    d = await client.get(f"/api/sessions/{sid}/download")
    assert d.status_code == 200
    assert d.headers["content-type"].startswith("application/pdf")
    assert len(d.content) > 50


@pytest.mark.anyio
async def test_download_without_result(client):
    sid = (await client.post("/api/sessions")).json()["session_id"]
    d = await client.get(f"/api/sessions/{sid}/download")
    assert d.status_code == 404
