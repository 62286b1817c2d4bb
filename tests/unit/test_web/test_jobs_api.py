from fastapi import FastAPI
from fastapi.testclient import TestClient

from rivalscope.web.api import jobs


class _FakeStore:
    def __init__(self):
        self.jobs = []
        self.deleted = []

    async def list_user_jobs(self, user_id):
        return [j for j in self.jobs if j.user_id == user_id]

    async def create_job(self, job):
        self.jobs.append(job)
        return job

    async def delete_job(self, job_id, user_id):
        self.deleted.append((job_id, user_id))
        before = len(self.jobs)
        self.jobs = [j for j in self.jobs if not (j.id == job_id and j.user_id == user_id)]
        return len(self.jobs) < before


def _build_client(store):
    app = FastAPI()
    jobs._job_store = store
    app.include_router(jobs.router, prefix="/api/jobs")
    return TestClient(app)


JOB_PAYLOAD = {
    "targetName": "Globex",
    "templateId": "pricing_monitor",
    "userEmail": "ada@example.com",
    "frequency": "WEEKLY_FRIDAY",
    "customQuery": "Did they change the Pro tier?",
}


def test_create_job():
    store = _FakeStore()
    client = _build_client(store)

    response = client.post("/api/jobs", json=JOB_PAYLOAD, headers={"X-User-ID": "u1"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    [job] = store.jobs
    assert body["jobId"] == job.id
    assert job.user_id == "u1"
    assert job.target_url == "https://google.com"
    assert job.frequency.value == "WEEKLY_FRIDAY"
    assert job.next_run.weekday() == 4
    assert (job.next_run.hour, job.next_run.minute) == (9, 0)


def test_create_job_missing_fields():
    client = _build_client(_FakeStore())

    response = client.post("/api/jobs", json={"targetName": "Globex"})

    assert response.status_code == 400
    assert "targetName, templateId, userEmail" in response.json()["detail"]


def test_create_job_unknown_template():
    client = _build_client(_FakeStore())

    response = client.post("/api/jobs", json={**JOB_PAYLOAD, "templateId": "stock_picker"})

    assert response.status_code == 400


def test_list_jobs_defaults_user():
    store = _FakeStore()
    client = _build_client(store)
    client.post("/api/jobs", json=JOB_PAYLOAD)
    client.post("/api/jobs", json=JOB_PAYLOAD, headers={"X-User-ID": "u2"})

    response = client.get("/api/jobs")

    assert response.status_code == 200
    [job] = response.json()["jobs"]
    assert job["userId"] == "default_user"
    assert job["targetName"] == "Globex"
    assert job["customQuery"] == "Did they change the Pro tier?"


def test_delete_job_scoped_to_user():
    store = _FakeStore()
    client = _build_client(store)
    job_id = client.post("/api/jobs", json=JOB_PAYLOAD, headers={"X-User-ID": "u1"}).json()["jobId"]

    other = client.delete(f"/api/jobs/{job_id}", headers={"X-User-ID": "u2"})
    own = client.delete(f"/api/jobs/{job_id}", headers={"X-User-ID": "u1"})

    assert other.status_code == own.status_code == 200
    assert own.json() == {"success": True}
    assert store.deleted == [(job_id, "u2"), (job_id, "u1")]
    assert store.jobs == []
