import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client() -> TestClient:
    from md_to_telegraph.main import app

    return TestClient(app)


@pytest.fixture(autouse=True)
def _clear_in_memory_stores():
    # Ensure deterministic tests across runs.
    from md_to_telegraph.services import run_pipeline

    run_pipeline._task_store.clear()
    yield
    run_pipeline._task_store.clear()


@pytest.fixture()
def guide_resolver():
    links = {"docs/guide.md": "https://pub.example/Guide-123"}

    def resolve(path: str) -> str:
        return links.get(path, path)

    return resolve
