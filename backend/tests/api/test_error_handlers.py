"""Error Handlers — envelopes for domain, validation and unexpected errors."""

import json

from starlette.requests import Request

from calcshare.api.error_handlers import handle_calcshare_error, handle_unexpected
from calcshare.core.errors import PermissionDeniedError


def _request(path="/api/save"):
    return Request({
        "type": "http", "method": "POST", "path": path,
        "headers": [], "query_string": b"", "server": ("test", 80),
        "scheme": "http", "root_path": "",
    })


async def test_domain_error_uses_its_status_and_envelope():
    res = await handle_calcshare_error(_request(), PermissionDeniedError("abcd1234"))
    body = json.loads(res.body)
    assert res.status_code == 403
    assert body["error"]["code"] == "PERMISSION_DENIED"
    assert body["error"]["context"]["record_id"] == "abcd1234"


async def test_unexpected_error_hides_details(caplog):
    with caplog.at_level("ERROR"):
        res = await handle_unexpected(_request(), RuntimeError("secret internals"))
    body = json.loads(res.body)
    assert res.status_code == 500
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert "secret internals" not in res.body.decode()
    assert "RuntimeError" in caplog.text
