import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.http_logging import HttpLoggingMiddleware, _redact, install_http_logging


def test_redact_masks_secrets_and_customer_pii():
    body = {
        "firstName": "Sam",
        "email": "sam@example.com",
        "answers": {"fuel": "Gas"},
        "nested": [{"Authorization": "Bearer x"}],
    }
    out = _redact(body)
    assert out["firstName"] == "***"
    assert out["email"] == "***"
    assert out["answers"] == {"fuel": "Gas"}
    assert out["nested"][0]["Authorization"] == "***"


def test_install_is_opt_in(monkeypatch):
    monkeypatch.delenv("QUOTE_FORM_HTTP_LOG", raising=False)
    app = FastAPI()
    install_http_logging(app)
    assert not any(m.cls is HttpLoggingMiddleware for m in app.user_middleware)

    monkeypatch.setenv("QUOTE_FORM_HTTP_LOG", "1")
    install_http_logging(app)
    assert any(m.cls is HttpLoggingMiddleware for m in app.user_middleware)


def test_middleware_logs_one_line_per_request(monkeypatch, caplog):
    monkeypatch.setenv("QUOTE_FORM_HTTP_LOG", "1")
    app = FastAPI()

    @app.post("/echo")
    async def echo(payload: dict):
        return {"ok": True, "email": payload.get("email")}

    install_http_logging(app)
    with caplog.at_level(logging.INFO, logger="api.http"):
        resp = TestClient(app).post("/echo", json={"email": "sam@example.com"})
    assert resp.status_code == 200
    lines = [r.getMessage() for r in caplog.records if r.name == "api.http"]
    assert len(lines) == 1
    assert '"path":"/echo"' in lines[0]
    assert "sam@example.com" not in lines[0]
