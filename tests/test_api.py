import httpx

from doodle_guess.config.models import DEFAULT_MODEL, PROFILES
from doodle_guess.orchestrator.errors import (
    MSG_INTERNAL, MSG_MISSING_IMAGE, MSG_NO_API_KEY, MSG_UPSTREAM,
)


def test_missing_image_is_400(client, upstream):
    r = client.post("/analyze-drawing", json={})
    assert r.status_code == 400
    assert r.json() == {"error": MSG_MISSING_IMAGE}
    assert upstream.calls == []


def test_empty_image_is_400(client):
    r = client.post("/analyze-drawing", json={"imageData": "", "modelName": "qwen-vl-max"})
    assert r.status_code == 400


def test_non_json_body_is_400(client):
    r = client.post("/analyze-drawing", content=b"not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert "error" in r.json()


def test_success(client, upstream, sketch):
    r = client.post("/analyze-drawing", json={"imageData": sketch, "modelName": "qwen-vl-max"})
    assert r.status_code == 200
    assert r.json() == {"guess": "猫", "success": True, "model": "Qwen-VL Max (标准版)"}


def test_outbound_request_shape(client, upstream, sketch):
    client.post("/analyze-drawing", json={"imageData": sketch, "modelName": "qwen-vl-max-latest"})
    assert len(upstream.calls) == 1
    req = upstream.calls[0]
    assert req.method == "POST"
    assert str(req.url) == "https://upstream.test/compatible-mode/v1/chat/completions"
    assert req.headers["authorization"] == "Bearer sk-test"

    body = upstream.last_json()
    profile = PROFILES["qwen-vl-max-latest"]
    assert body["model"] == profile.model
    assert body["temperature"] == profile.temperature
    assert body["max_tokens"] == profile.max_tokens
    [msg] = body["messages"]
    assert msg["role"] == "user"
    assert msg["content"][0] == {"type": "text", "text": profile.prompt}
    assert msg["content"][1] == {"type": "image_url", "image_url": {"url": sketch}}


def test_unknown_model_falls_back_to_default(client, upstream, sketch):
    r = client.post("/analyze-drawing", json={"imageData": sketch, "modelName": "no-such-model"})
    assert r.status_code == 200
    assert r.json()["model"] == PROFILES[DEFAULT_MODEL].display_name
    assert upstream.last_json()["model"] == PROFILES[DEFAULT_MODEL].model


def test_non_string_model_falls_back_to_default(client, upstream, sketch):
    r = client.post("/analyze-drawing", json={"imageData": sketch, "modelName": 5})
    assert r.status_code == 200
    assert r.json()["model"] == PROFILES[DEFAULT_MODEL].display_name
    assert len(upstream.calls) == 1


def test_absent_model_uses_configured_default(make_client, upstream, sketch):
    c = make_client(default_model="qwen-vl-plus")
    r = c.post("/analyze-drawing", json={"imageData": sketch})
    assert r.json()["model"] == PROFILES["qwen-vl-plus"].display_name


def test_missing_credential_is_500_without_outbound_call(make_client, upstream, sketch):
    c = make_client(api_key=None)
    r = c.post("/analyze-drawing", json={"imageData": sketch})
    assert r.status_code == 500
    assert r.json() == {"error": MSG_NO_API_KEY}
    assert upstream.calls == []


def test_empty_content_gives_placeholder(client, upstream, sketch):
    upstream.body = {"choices": [{"message": {"content": ""}}]}
    assert client.post("/analyze-drawing", json={"imageData": sketch}).json()["guess"] == "无法识别"

    upstream.body = {"choices": []}
    assert client.post("/analyze-drawing", json={"imageData": sketch}).json()["guess"] == "无法识别"


def test_guess_is_stripped(client, upstream, sketch):
    upstream.body = {"choices": [{"message": {"content": "  小猫\n"}}]}
    assert client.post("/analyze-drawing", json={"imageData": sketch}).json()["guess"] == "小猫"


def test_upstream_error_keeps_status_hides_body(client, upstream, sketch):
    upstream.status_code = 429
    upstream.body = {"error": {"message": "secret quota details"}}
    r = client.post("/analyze-drawing", json={"imageData": sketch})
    assert r.status_code == 429
    assert r.json() == {"error": MSG_UPSTREAM}


def test_upstream_timeout_is_504(client, upstream, sketch):
    upstream.exc = httpx.ReadTimeout("timed out")
    r = client.post("/analyze-drawing", json={"imageData": sketch})
    assert r.status_code == 504
    assert r.json() == {"error": MSG_UPSTREAM}


def test_network_error_is_500(client, upstream, sketch):
    upstream.exc = httpx.ConnectError("connection refused")
    r = client.post("/analyze-drawing", json={"imageData": sketch})
    assert r.status_code == 500
    assert r.json() == {"error": MSG_INTERNAL}


def test_invalid_upstream_json_is_500(client, upstream, sketch):
    upstream.body = "<html>oops</html>"
    r = client.post("/analyze-drawing", json={"imageData": sketch})
    assert r.status_code == 500
    assert r.json() == {"error": MSG_INTERNAL}


def test_status_records_relay_activity(client, upstream, sketch):
    client.post("/analyze-drawing", json={"imageData": sketch})
    upstream.status_code = 503
    client.post("/analyze-drawing", json={"imageData": sketch})

    data = client.get("/status").json()
    assert data["in_flight"] == 0
    assert data["last_guess"] == {"guess": "猫", "model": PROFILES[DEFAULT_MODEL].display_name}
    assert data["last_error"] == MSG_UPSTREAM
    assert any("HTTP 503" in line for line in data["logs"])


def test_models_endpoint(client):
    data = client.get("/models").json()
    assert data["default"] == DEFAULT_MODEL
    names = [m["name"] for m in data["models"]]
    assert names == list(PROFILES)
    first = data["models"][0]
    assert first["displayName"] == PROFILES[names[0]].display_name
    assert first["comparison"]["features"]


def test_health(make_client):
    assert make_client().get("/health").json()["all_ok"] is True
    assert make_client(api_key=None).get("/health").json()["credential_configured"] is False
