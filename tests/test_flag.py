import hashlib

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortcode_app.errors import IntegrityTokenNotFound
from shortcode_app.services.integrity import compute_flag_token, extract_integrity_code


class TestIntegrityToken:

    def test_skips_sha_integrities(self):
        template = (
            '<link integrity="sha384-abc" href="a.css">'
            '<link integrity="token-123" href="b.css">'
            '<link integrity="token-456" href="c.css">'
        )
        assert extract_integrity_code(template) == "token-123"

    def test_missing_token(self):
        with pytest.raises(IntegrityTokenNotFound):
            extract_integrity_code('<link integrity="sha512-only">')

    def test_token_is_sha512_hex(self, tmp_path):
        template = tmp_path / "index.html"
        template.write_text('<link integrity="sha256-x"><link integrity="code-1">', encoding="utf-8")

        assert compute_flag_token(template) == hashlib.sha512(b"code-1").hexdigest()

    def test_packaged_template_has_token(self, context):
        assert len(context.flag_token) == 128

    def test_packaged_template_has_no_sri_hashes(self, context):
        template = context.docs.index_path.read_text(encoding="utf-8")
        assert 'integrity="sha' not in template
        assert context.flag_token == hashlib.sha512(b"rt-2f9c41d7b8e05a36").hexdigest()


class TestFlagEndpoint:

    def test_fixed_response_and_notification(self, client: TestClient, context, outbound):
        target = f"/flag/{context.flag_token}"

        response = client.post(
            f"{target}?from=test",
            json={"username": "visitor", "note": "hi"},
            headers={"X-Forwarded-For": "203.0.113.9"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["method"] == "POST"
        assert data["target"] == target
        assert data["reference"].startswith("https://gist.github.com/")
        assert data["body"] == {"username": "discord#1337", "content": "Tell us who you are, legend"}

        payloads = outbound.hook_payloads()
        assert len(payloads) == 1
        payload = payloads[0]
        assert payload["content"].startswith("```json\n")
        assert '"ip": "203.0.113.9"' in payload["content"]
        assert '"from": "test"' in payload["content"]
        assert payload["note"] == "hi"
        # Request body fields override the default username
        assert payload["username"] == "visitor"

    def test_username_defaults_to_app_root(self, client: TestClient, context, outbound):
        client.get(f"/flag/{context.flag_token}")

        assert outbound.hook_payloads()[0]["username"] == "shorty"

    def test_nested_paths_are_handled(self, client: TestClient, context):
        response = client.put(f"/flag/{context.flag_token}/anything/below")

        assert response.status_code == 200
        assert response.json()["target"] == f"/flag/{context.flag_token}"

    def test_webhook_failure_is_not_surfaced(self, client: TestClient, context, outbound):
        outbound.hook_status = 500

        response = client.post(f"/flag/{context.flag_token}", json={})

        assert response.status_code == 200
        assert len(outbound.hook_payloads()) == 1

    def test_malformed_multipart_body_still_answers(self, client: TestClient, context, outbound):
        response = client.post(
            f"/flag/{context.flag_token}",
            content=b"garbage",
            headers={"Content-Type": "multipart/form-data"},
        )

        assert response.status_code == 200
        assert response.json()["target"] == f"/flag/{context.flag_token}"
        assert outbound.hook_payloads()[0]["username"] == "shorty"

    def test_wrong_token_serves_documentation(self, client: TestClient):
        response = client.get("/flag/0000")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")

    def test_without_webhook(self, settings, outbound):
        settings.notify_hook_url = ""
        app = create_app(settings, http_client_factory=outbound.client_factory)

        with TestClient(app) as client:
            response = client.get(f"/flag/{app.state.context.flag_token}")

        assert response.status_code == 200
        assert outbound.requests == []
