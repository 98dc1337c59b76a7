def test_list_returns_all(client):
    resp = client.get("/api/pollutions")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/json; charset=utf-8"
    body = resp.json()
    assert [item["id"] for item in body] == ["a", "b"]
    assert body[0]["recordedAt"] == "2024-02-15T09:20:00.000Z"
    assert body[0]["level"] == 87
    assert isinstance(body[0]["level"], int)


def test_list_applies_query_filters(client):
    assert [i["id"] for i in client.get("/api/pollutions", params={"type": "air"}).json()] == ["a"]
    assert [i["id"] for i in client.get("/api/pollutions", params={"minLevel": "70"}).json()] == ["a"]
    assert [i["id"] for i in client.get("/api/pollutions", params={"search": "rivière"}).json()] == ["b"]
    assert [i["id"] for i in client.get("/api/pollutions", params={"city": "", "status": ""}).json()] == ["a", "b"]


def test_list_ignores_non_numeric_level(client):
    resp = client.get("/api/pollutions", params={"minLevel": "abc", "maxLevel": "lots"})
    assert resp.status_code == 200
    assert [i["id"] for i in resp.json()] == ["a", "b"]


def test_get_by_id(client):
    resp = client.get("/api/pollutions/b")
    assert resp.status_code == 200
    assert resp.json()["city"] == "Nantes"


def test_get_missing_returns_404(client):
    resp = client.get("/api/pollutions/missing")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Pollution not found"}


def test_create(client, make_payload):
    resp = client.post("/api/pollutions", json=make_payload())
    assert resp.status_code == 201
    body = resp.json()
    assert body["id"]
    assert body["recordedAt"] == "2024-04-01T10:00:00.000Z"
    listed = client.get("/api/pollutions").json()
    assert listed[0]["id"] == body["id"]


def test_create_requires_every_field(client, make_payload):
    payload = make_payload()
    del payload["level"]
    resp = client.post("/api/pollutions", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Missing field: level"}


def test_create_with_empty_body(client):
    resp = client.post("/api/pollutions")
    assert resp.status_code == 400
    assert resp.json() == {"message": "Missing field: name"}


def test_create_rejects_unknown_type(client, make_payload):
    resp = client.post("/api/pollutions", json=make_payload(type="lava"))
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid field: type"}


def test_create_rejects_malformed_json(client):
    resp = client.post(
        "/api/pollutions",
        content="{broken",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid JSON body"}


def test_update(client, make_payload):
    resp = client.put("/api/pollutions/a", json=make_payload(status="resolved"))
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == "a"
    assert body["status"] == "resolved"
    assert body["city"] == "Grenoble"


def test_update_missing_is_checked_before_payload(client):
    resp = client.put("/api/pollutions/missing", json={})
    assert resp.status_code == 404


def test_update_requires_every_field(client):
    resp = client.put("/api/pollutions/a", json={"status": "resolved"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Missing field: name"}


def test_delete(client):
    resp = client.delete("/api/pollutions/a")
    assert resp.status_code == 204
    assert resp.content == b""
    assert client.get("/api/pollutions/a").status_code == 404
    assert client.delete("/api/pollutions/a").status_code == 404


def test_options_returns_cors_headers(client):
    resp = client.options("/api/pollutions/anything")
    assert resp.status_code == 204
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-methods"] == "GET,POST,PUT,DELETE,OPTIONS"
    assert resp.headers["access-control-allow-headers"] == "Content-Type"


def test_cors_headers_on_regular_requests(client):
    for headers in ({}, {"Origin": "http://localhost:4200"}):
        resp = client.get("/api/pollutions", headers=headers)
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["access-control-allow-methods"] == "GET,POST,PUT,DELETE,OPTIONS"
        assert resp.headers["access-control-allow-headers"] == "Content-Type"


def test_cors_headers_on_errors(client):
    resp = client.get("/api/pollutions/missing")
    assert resp.status_code == 404
    assert resp.headers["access-control-allow-methods"] == "GET,POST,PUT,DELETE,OPTIONS"


def test_unknown_path(client):
    resp = client.get("/api/other")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Endpoint not found"}


def test_unsupported_method(client):
    resp = client.patch("/api/pollutions/a", json={})
    assert resp.status_code == 405
    assert resp.json() == {"message": "Method PATCH not supported"}


def test_internal_error(client, service, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(service, "query", explode)
    resp = client.get("/api/pollutions")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Internal server error"}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "records": 2}


def test_create_rejects_out_of_range_timestamp(client, make_payload):
    resp = client.post("/api/pollutions", json=make_payload(recordedAt="0001-01-01T00:00:00+01:00"))
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid field: recordedAt"}


def test_update_unleveled_record_accepts_null_level(client, mixed_service, make_payload):
    from pollu_tracker.core.dependencies import get_pollution_service
    from pollu_tracker.main import app

    app.dependency_overrides[get_pollution_service] = lambda: mixed_service
    resp = client.put("/api/pollutions/c", json=make_payload(level=None, status="resolved"))
    assert resp.status_code == 200
    assert resp.json()["level"] is None
    assert client.put("/api/pollutions/a", json=make_payload(level=None)).json() == {
        "message": "Missing field: level"
    }


def test_handlers_are_documented(client):
    paths = client.get("/openapi.json").json()["paths"]
    assert paths["/api/pollutions"]["get"]["description"] == "List pollutions matching the query filters"
    assert paths["/api/pollutions/{pollution_id}"]["put"]["description"] == "Update a pollution"
