def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_db_ping(client):
    r = client.get("/db-ping")
    assert r.status_code == 200
    body = r.json()
    assert body["db"] == "ok"
    assert body["value"] == 1


def test_ledger_routes_registered(client):
    paths = client.get("/openapi.json").json()["paths"]
    for path in ("/members", "/contributions", "/contributions/sum", "/years/{year}/close"):
        assert path in paths
