def test_health(client):
    """GET /health reports healthy with the service name."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "NEAR Contract Compiler"}


def test_health_unaffected_by_compiles(client, toolchain):
    """Compile activity, including failures, doesn't change /health."""
    toolchain.build_returncode = 1
    client.post("/compile", json={"code": "x", "contract_name": "a"})
    toolchain.missing.add("cargo")
    client.post("/compile", json={"code": "x", "contract_name": "b"})

    response = client.get("/health")
    assert response.json()["status"] == "healthy"


def test_templates(client):
    """GET /templates returns the built-in contracts."""
    response = client.get("/templates")
    assert response.status_code == 200

    templates = response.json()
    assert [t["name"] for t in templates] == ["Hello World", "Counter"]
    for template in templates:
        assert set(template) == {"name", "description", "code"}
        assert "near_bindgen" in template["code"]


def test_templates_greeting_contract(client):
    """The Hello World template has the greeting getter and setter."""
    hello = client.get("/templates").json()[0]
    assert "get_greeting" in hello["code"]
    assert "set_greeting" in hello["code"]
