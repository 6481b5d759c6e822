import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gitrev.api.main import app, service

from conftest import BASE_TIME


# Fixture for async client
@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# Point the global service at the fixture repository
@pytest.fixture(autouse=True)
def served_repo(history):
    service.open(history.path)
    return history


@pytest.mark.asyncio
async def test_health(client, history):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "repo": str(history.path)}


@pytest.mark.asyncio
async def test_get_commits(client, history):
    response = await client.get("/api/commits", params={"rev": "main"})
    assert response.status_code == 200
    data = response.json()
    assert [c["oid"] for c in data] == [history["c3"], history["c2"], history["c1"]]
    assert data[0]["summary"] == "Write guide"
    assert data[-1]["parent_oids"] == []


@pytest.mark.asyncio
async def test_get_commits_filters(client, history):
    response = await client.get(
        "/api/commits", params={"rev": "feature", "path": "src", "limit": 1}
    )
    assert [c["oid"] for c in response.json()] == [history["f2"]]

    response = await client.get("/api/commits", params={"rev": "main", "since": "2200-01-01T00:00:00Z"})
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_get_commit_detail(client, history):
    response = await client.get(f"/api/commits/{history['f2'][:8]}")
    assert response.status_code == 200
    data = response.json()
    assert data["oid"] == history["f2"]
    assert data["message"] == "Update app\n\nLonger body.\n"
    assert data["committer"]["timestamp"] == BASE_TIME + 400
    assert data["author"]["name"] == "Ada"


@pytest.mark.asyncio
async def test_get_commit_not_found(client):
    response = await client.get("/api/commits/deadbeef00")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_diff(client):
    response = await client.get(
        "/api/diff", params={"base": "main", "head": "feature", "merge_base": "true"}
    )
    assert response.status_code == 200
    assert response.json()["files"] == ["fix.txt", "src/app.py"]


@pytest.mark.asyncio
async def test_rev_list(client, history):
    response = await client.get("/api/rev-list", params={"refspec": "main...feature"})
    assert [c["oid"] for c in response.json()] == [history["f2"], history["f1"], history["c3"]]

    response = await client.get("/api/rev-list/count", params=[("refspec", "main"), ("refspec", "feature")])
    assert response.json()["count"] == 5


@pytest.mark.asyncio
async def test_rev_list_requires_refspec(client):
    response = await client.get("/api/rev-list/count")
    assert response.status_code == 422
    assert response.json()["detail"] == "must have at least one refspec"


@pytest.mark.asyncio
async def test_latest_commit_time(client):
    response = await client.get("/api/branches/feature/latest-commit-time")
    assert response.status_code == 200
    assert response.json()["timestamp"] == BASE_TIME + 400

    response = await client.get("/api/branches/no-such-branch/latest-commit-time")
    assert response.status_code == 404
