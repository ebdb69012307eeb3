import importlib

import pytest
from fastapi.testclient import TestClient

from site_compiler.edit_classifier import KeywordEditClassifier
from site_compiler.field_updaters import KeywordConfigMutator
from site_compiler.generator import SiteGenerator
from site_compiler.normalize import normalize_config


@pytest.fixture
def api(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "dev")
    monkeypatch.delenv("PROJECT_ID", raising=False)
    monkeypatch.delenv("IMAGE_BUCKET", raising=False)
    module = importlib.import_module("services.api.main")
    module = importlib.reload(module)
    return module


@pytest.fixture
def client(api):
    return TestClient(api.app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_compile_returns_files_and_dependencies(client, bistro_raw):
    response = client.post("/v1/sites:compile", json={"config": bistro_raw})

    assert response.status_code == 200
    body = response.json()
    paths = [item["path"] for item in body["files"]]
    assert paths[:6] == [
        "app/layout.tsx",
        "app/globals.css",
        "tailwind.config.ts",
        "postcss.config.js",
        "package.json",
        "app/loading.tsx",
    ]
    assert "app/about/page.tsx" in paths
    assert "next" in body["dependencies"]
    assert body["config"]["templateId"] == "restaurant"
    assert body["images"]["status"] == "PENDING"


def test_compile_rejects_invalid_config(client, bistro_raw):
    bistro_raw["theme"]["primary"] = "chartreuse"

    response = client.post("/v1/sites:compile", json={"config": bistro_raw})

    assert response.status_code == 422


def test_edit_job_runs_in_the_background(client, bistro_raw):
    response = client.post(
        "/v1/sites:edit",
        json={"edit_text": "Change the primary color to blue", "config": bistro_raw, "site_id": "bistro"},
    )

    assert response.status_code == 200
    job_id = response.json()["job_id"]
    assert job_id.startswith("job_bistro_")

    job = client.get(f"/v1/jobs/{job_id}").json()
    assert job["status"] == "COMPLETED"
    assert job["outputs"]["config"]["theme"]["primary"] == "blue"
    assert job["outputs"]["changed_paths"] == ["theme.primary"]


def test_generate_is_unavailable_without_a_model(client):
    response = client.post("/v1/sites:generate", json={"prompt": "a bakery"})

    assert response.status_code == 503


def test_generate_with_a_configured_generator(api, client, bistro_raw, monkeypatch):
    class StubConfigGenerator:
        def generate_config(self, prompt, images=None):
            return normalize_config(bistro_raw)

    generator = SiteGenerator(
        config_generator=StubConfigGenerator(),
        classifier=KeywordEditClassifier(),
        mutator=KeywordConfigMutator(),
    )
    monkeypatch.setattr(api, "site_generator", generator)

    response = client.post("/v1/sites:generate", json={"prompt": "a french bistro"})

    assert response.status_code == 200
    job = client.get(f"/v1/jobs/{response.json()['job_id']}").json()
    assert job["status"] == "COMPLETED"
    assert "app/menu/page.tsx" in job["outputs"]["files"]
    assert job["outputs"]["should_regenerate"] is False


def test_unknown_job_is_404(client):
    assert client.get("/v1/jobs/job_missing").status_code == 404
