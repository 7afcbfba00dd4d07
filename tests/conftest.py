"""
Pytest configuration and shared fixtures
"""

import os

os.environ.setdefault("ARK_ENVIRONMENT", "testing")

import itertools
import json
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from arkitek_builder.main import app
from arkitek_builder.api.routes import init_cluster_link_services
from arkitek_builder.api.web_interface_routes import init_web_interface_services
from arkitek_builder.config.settings import BootScriptConfig
from arkitek_builder.registry.link_registry import ClusterLinkRegistry
from arkitek_builder.services.boot_script_generator import BootScriptGenerator
from arkitek_builder.storage.file_backend import JsonFileStorageBackend
from arkitek_builder.storage.memory_backend import MemoryStorageBackend


@pytest.fixture
def links_file(tmp_path):
    """Path of a links file that does not exist yet"""
    return tmp_path / "data" / "cluster-links.json"


@pytest.fixture
def file_backend(links_file):
    """File storage backend writing into a temporary directory"""
    return JsonFileStorageBackend(str(links_file))


@pytest.fixture
def memory_backend():
    """Empty in-memory storage backend"""
    return MemoryStorageBackend()


@pytest.fixture
def sequential_ids():
    """ID factory producing link-1, link-2, ..."""
    counter = itertools.count(1)
    return lambda: f"link-{next(counter)}"


@pytest.fixture
def registry(file_backend, sequential_ids):
    """Registry backed by a temporary JSON file"""
    return ClusterLinkRegistry(file_backend, id_factory=sequential_ids)


@pytest.fixture
def generator():
    """Boot script generator with default settings"""
    return BootScriptGenerator(BootScriptConfig())


@pytest.fixture
def fixed_time():
    """A fixed generation timestamp"""
    return datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def client(registry, generator):
    """Test client for the FastAPI application wired to temporary storage"""
    init_cluster_link_services(registry, generator)
    init_web_interface_services(registry, generator)
    return TestClient(app)


@pytest.fixture
def sample_records():
    """Two stored link records in on-disk form"""
    return [
        {
            "id": "1700000000000",
            "name": "alpha",
            "endpoint": "https://alpha.example.com",
            "credentials": "",
            "builderType": "generic",
            "createdAt": "2024-01-15T10:30:00.000Z",
            "status": "active"
        },
        {
            "id": "1700000000001",
            "name": "beta",
            "endpoint": "https://beta.example.com",
            "credentials": "token-123",
            "builderType": "metal",
            "createdAt": "2024-01-15T10:31:00.000Z",
            "status": "active"
        }
    ]


@pytest.fixture
def write_links(links_file):
    """Write raw content into the links file"""
    def _write(content):
        links_file.parent.mkdir(parents=True, exist_ok=True)
        if not isinstance(content, str):
            content = json.dumps(content, indent=2)
        links_file.write_text(content, encoding="utf-8")
        return links_file
    return _write
