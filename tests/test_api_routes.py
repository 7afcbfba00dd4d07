"""
Tests for the HTTP API routes.
"""

import json
import pytest
from unittest.mock import patch

from arkitek_builder.exceptions import PersistenceError


def create(client, **body):
    return client.post("/api/cluster-links", json=body)


@pytest.mark.unit
class TestClusterLinkRoutes:
    """Test /api/cluster-links endpoints."""

    def test_list_empty(self, client):
        response = client.get("/api/cluster-links")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_malformed_store_is_empty(self, client, write_links):
        write_links("{{{")

        response = client.get("/api/cluster-links")

        assert response.status_code == 200
        assert response.json() == []

    def test_create_returns_created_link(self, client):
        response = create(client, name="alpha", endpoint="https://alpha.example.com")

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "link-1"
        assert data["name"] == "alpha"
        assert data["endpoint"] == "https://alpha.example.com"
        assert data["credentials"] == ""
        assert data["builderType"] == "generic"
        assert data["status"] == "active"
        assert data["createdAt"]

    def test_create_accepts_optional_fields(self, client):
        response = create(
            client,
            name="beta",
            endpoint="10.0.0.5:6443",
            credentials="token-123",
            builderType="metal"
        )

        assert response.status_code == 201
        assert response.json()["credentials"] == "token-123"
        assert response.json()["builderType"] == "metal"

    def test_created_link_is_listed(self, client):
        created = create(client, name="alpha", endpoint="https://alpha.example.com").json()

        response = client.get("/api/cluster-links")

        assert response.json() == [created]

    def test_create_persists_to_file(self, client, links_file):
        create(client, name="alpha", endpoint="https://alpha.example.com")

        records = json.loads(links_file.read_text(encoding="utf-8"))
        assert [record["name"] for record in records] == ["alpha"]

    @pytest.mark.parametrize("body,missing", [
        ({"endpoint": "https://x.example.com"}, ["name"]),
        ({"name": "alpha"}, ["endpoint"]),
        ({"name": "", "endpoint": ""}, ["name", "endpoint"]),
        ({}, ["name", "endpoint"]),
    ])
    def test_create_missing_fields(self, client, links_file, body, missing):
        response = client.post("/api/cluster-links", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["details"]["missing_fields"] == missing
        assert data["request_id"]
        assert not links_file.exists()

    def test_create_without_body(self, client):
        response = client.post("/api/cluster-links")

        assert response.status_code == 400
        assert response.json()["details"]["missing_fields"] == ["name", "endpoint"]

    def test_create_duplicate_name(self, client):
        create(client, name="alpha", endpoint="https://alpha.example.com")

        response = create(client, name="alpha", endpoint="https://other.example.com")

        assert response.status_code == 409
        data = response.json()
        assert data["error"] == "CONFLICT"
        assert "alpha" in data["message"]
        assert len(client.get("/api/cluster-links").json()) == 1

    def test_create_with_wrong_type(self, client):
        response = create(client, name=["alpha"], endpoint="https://alpha.example.com")

        assert response.status_code == 422
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_create_storage_failure(self, client):
        with patch("aiofiles.os.replace", side_effect=OSError("read-only file system")):
            response = create(client, name="alpha", endpoint="https://alpha.example.com")

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "STORAGE_ERROR"
        assert data["details"]["operation"] == "save_links"
        assert client.get("/api/cluster-links").json() == []

    def test_delete(self, client):
        alpha = create(client, name="alpha", endpoint="https://alpha.example.com").json()
        beta = create(client, name="beta", endpoint="https://beta.example.com").json()

        response = client.delete(f"/api/cluster-links/{alpha['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Cluster link deleted successfully", "id": alpha["id"]}
        assert client.get("/api/cluster-links").json() == [beta]

    def test_delete_unknown_id(self, client):
        create(client, name="alpha", endpoint="https://alpha.example.com")

        response = client.delete("/api/cluster-links/nope")

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"
        assert len(client.get("/api/cluster-links").json()) == 1

    def test_delete_twice(self, client):
        alpha = create(client, name="alpha", endpoint="https://alpha.example.com").json()

        assert client.delete(f"/api/cluster-links/{alpha['id']}").status_code == 200
        assert client.delete(f"/api/cluster-links/{alpha['id']}").status_code == 404

    def test_existing_records_are_served(self, client, write_links, sample_records):
        write_links(sample_records)

        data = client.get("/api/cluster-links").json()

        assert [link["id"] for link in data] == ["1700000000000", "1700000000001"]
        assert data[1]["builderType"] == "metal"

    def test_request_id_header(self, client):
        response = client.get("/api/cluster-links")

        assert response.headers["X-Request-ID"]


@pytest.mark.unit
class TestBootScriptRoutes:
    """Test /api/ipxe/generate."""

    def test_generate_script(self, client):
        response = client.post("/api/ipxe/generate", json={"clusterName": "alpha", "serverCount": 3})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.headers["content-disposition"] == 'attachment; filename="alpha-boot.ipxe"'
        script = response.text
        assert script.startswith("#!ipxe\n")
        assert script.count("set server-") == 3
        assert "kernel http://boot.example.com/vmlinuz quiet splash cluster=alpha nodes=3\n" in script

    def test_generate_with_overrides(self, client):
        response = client.post("/api/ipxe/generate", json={
            "clusterName": "prod",
            "serverCount": 2,
            "bootImage": "http://images.local/k",
            "kernelParams": "console=ttyS0"
        })

        assert response.status_code == 200
        assert "kernel http://images.local/k console=ttyS0 cluster=prod nodes=2\n" in response.text

    def test_blank_overrides_use_defaults(self, client):
        response = client.post("/api/ipxe/generate", json={
            "clusterName": "alpha",
            "serverCount": 1,
            "bootImage": "  ",
            "kernelParams": ""
        })

        assert "kernel http://boot.example.com/vmlinuz quiet splash cluster=alpha nodes=1\n" in response.text

    def test_filename_is_sanitized(self, client):
        response = client.post("/api/ipxe/generate", json={"clusterName": 'eu "west"', "serverCount": 1})

        assert response.headers["content-disposition"] == 'attachment; filename="eu__west_-boot.ipxe"'

    @pytest.mark.parametrize("body,missing", [
        ({"serverCount": 3}, ["clusterName"]),
        ({"clusterName": "alpha"}, ["serverCount"]),
        ({"clusterName": "   ", "serverCount": 3}, ["clusterName"]),
        ({}, ["clusterName", "serverCount"]),
    ])
    def test_missing_fields(self, client, body, missing):
        response = client.post("/api/ipxe/generate", json=body)

        assert response.status_code == 400
        assert response.json()["details"]["missing_fields"] == missing

    @pytest.mark.parametrize("server_count", [0, -5, 1025])
    def test_invalid_server_count(self, client, server_count):
        response = client.post("/api/ipxe/generate", json={"clusterName": "alpha", "serverCount": server_count})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["details"]["field"] == "serverCount"

    @pytest.mark.parametrize("server_count", ["3", "many", True, 2.5])
    def test_non_integer_server_count(self, client, server_count):
        response = client.post("/api/ipxe/generate", json={"clusterName": "alpha", "serverCount": server_count})

        assert response.status_code == 422

    def test_multiline_cluster_name_rejected(self, client):
        response = client.post("/api/ipxe/generate", json={"clusterName": "a\nshell", "serverCount": 1})

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "clusterName"


@pytest.mark.unit
class TestDiagnosticsRoutes:
    """Test benchmark and continuous test endpoints."""

    def test_benchmark_defaults(self, client):
        response = client.post("/api/benchmark/run", json={"endpoint": "https://alpha.example.com"})

        assert response.status_code == 200
        data = response.json()
        assert data["endpoint"] == "https://alpha.example.com"
        assert data["testType"] == "stress"
        assert data["iterations"] == 100
        assert data["status"] == "running"
        assert data["startTime"]

    def test_benchmark_parameters(self, client):
        response = client.post("/api/benchmark/run", json={
            "endpoint": "https://alpha.example.com",
            "testType": "latency",
            "iterations": 5
        })

        assert response.json()["testType"] == "latency"
        assert response.json()["iterations"] == 5

    def test_benchmark_requires_endpoint(self, client):
        response = client.post("/api/benchmark/run", json={"testType": "latency"})

        assert response.status_code == 400
        assert response.json()["details"]["missing_fields"] == ["endpoint"]

    def test_benchmark_rejects_zero_iterations(self, client):
        response = client.post("/api/benchmark/run", json={"endpoint": "e", "iterations": 0})

        assert response.status_code == 422

    def test_run_until_fail_defaults(self, client):
        response = client.post("/api/test/run-until-fail", json={"clusterName": "alpha"})

        assert response.status_code == 200
        data = response.json()
        assert data["clusterName"] == "alpha"
        assert data["testType"] == "continuous"
        assert data["maxIterations"] == 1000
        assert data["status"] == "running"
        assert data["message"] == "Running continuous tests on alpha until failure is detected"

    def test_run_until_fail_requires_cluster_name(self, client):
        response = client.post("/api/test/run-until-fail", json={})

        assert response.status_code == 400
        assert response.json()["details"]["missing_fields"] == ["clusterName"]


@pytest.mark.unit
class TestWebInterfaceRoutes:
    """Test /web data endpoints."""

    def test_dashboard(self, client, write_links, sample_records):
        write_links(sample_records)

        data = client.get("/web/dashboard").json()

        assert data["linkCount"] == 2
        assert data["builderTypes"] == {"generic": 1, "metal": 1}
        assert [link["name"] for link in data["clusterLinks"]] == ["alpha", "beta"]

    def test_dashboard_empty(self, client):
        data = client.get("/web/dashboard").json()

        assert data == {"clusterLinks": [], "linkCount": 0, "builderTypes": {}}

    def test_cluster_config(self, client):
        create(client, name="alpha", endpoint="https://alpha.example.com")

        data = client.get("/web/cluster-config").json()

        assert [link["name"] for link in data["clusterLinks"]] == ["alpha"]

    def test_ipxe_boot(self, client):
        data = client.get("/web/ipxe-boot").json()

        assert data["clusterLinks"] == []
        assert data["defaults"] == {
            "bootImage": "http://boot.example.com/vmlinuz",
            "kernelParams": "quiet splash",
            "initrdImage": "http://boot.example.com/initrd.img",
            "maxServerCount": 1024
        }


@pytest.mark.unit
class TestGeneralRoutes:
    """Test root, health and error handling."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Arkitek Builder"
        assert data["endpoints"]["cluster_links"] == "/api/cluster-links"
        assert data["endpoints"]["ipxe_generate"] == "/api/ipxe/generate"

    def test_health(self, client, registry, write_links):
        write_links([])

        with patch("arkitek_builder.main.link_registry", registry):
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["storage"]["snapshot_state"] == "loaded"

    def test_health_reports_malformed_storage(self, client, registry, write_links):
        write_links("nope")

        with patch("arkitek_builder.main.link_registry", registry):
            data = client.get("/health").json()

        assert data["status"] == "unhealthy"

    def test_unknown_route(self, client):
        response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_method_not_allowed(self, client):
        response = client.put("/api/cluster-links")

        assert response.status_code == 405
        assert response.json()["error"] == "METHOD_NOT_ALLOWED"


@pytest.mark.unit
def test_persistence_error_maps_to_500(client, registry):
    with patch.object(registry, "delete_link", side_effect=PersistenceError(
        "Failed to write", backend_type="file", operation="save_links"
    )):
        response = client.delete("/api/cluster-links/any")

    assert response.status_code == 500
    assert response.json()["error"] == "STORAGE_ERROR"
