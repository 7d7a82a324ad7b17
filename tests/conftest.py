import pytest
from fastapi.testclient import TestClient

from kiosk.client import JobClient
from tests.stub_server import StubKiosk, create_app

BASE_URL = "http://testserver/api"
JOB_TYPE = "test"

@pytest.fixture
def stub():
    return StubKiosk()

@pytest.fixture
def http_client(stub):
    with TestClient(create_app(stub), base_url="http://testserver") as c:
        yield c

@pytest.fixture
def client(http_client):
    with JobClient(BASE_URL, http_client=http_client) as c:
        yield c

@pytest.fixture
def job(client):
    return client.new_job(JOB_TYPE)

@pytest.fixture
def queued_job(client):
    job = client.new_job(JOB_TYPE)
    job.job_hash = "jobHash"
    return job

@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "cells.png"
    path.write_bytes(b"\x89PNG fake image bytes")
    return path
