import os
import pytest
from moto import mock_aws
from fastapi.testclient import TestClient
import boto3

# Set test environment variables BEFORE importing app modules
os.environ["STORAGE_ACCESS_KEY_ID"] = "testing"
os.environ["STORAGE_SECRET_ACCESS_KEY"] = "testing"
os.environ["STORAGE_REGION"] = "us-east-1"
os.environ["STORAGE_BUCKET"] = "memorias"
os.environ["MEMORIA_PASSWORD"] = "lucasnatalia"
# Clear endpoints so moto mocks are used instead of a live backend
os.environ.pop("STORAGE_ENDPOINT_URL", None)
os.environ.pop("STORAGE_PUBLIC_URL", None)

# Dummy AWS credentials for moto
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"

from memoria.main import app
from memoria.settings import Settings
from memoria.storage.gateway import S3StorageGateway


@pytest.fixture(scope="function")
def s3_mock():
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket="memorias")
        yield s3


@pytest.fixture(scope="function")
def gateway(s3_mock):
    gw = S3StorageGateway(Settings())
    yield gw
    gw.close()


@pytest.fixture(scope="function")
def test_client(s3_mock):
    # The lifespan builds the S3 gateway inside the moto context
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def auth_client(test_client):
    resp = test_client.post("/api/auth", json={"password": "lucasnatalia"})
    assert resp.status_code == 200
    return test_client
