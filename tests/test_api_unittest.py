import asyncio
import json
import unittest

from tornado import httpclient

from huifu_console.api import ApiResponse, ConsoleApi
from huifu_console.exceptions import ConsoleTransportError
from huifu_console.models import SystemConfig


class _FakeResponse:
    def __init__(self, code, body):
        self.code = code
        self.body = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")


class _FakeHttpClient:
    def __init__(self, reply):
        self.reply = reply
        self.requests = []

    async def fetch(self, request, raise_error=True):
        self.requests.append((request, raise_error))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def _api(reply):
    client = _FakeHttpClient(reply)
    return ConsoleApi("http://backend:8080/api/", request_timeout=5, http_client=client), client


class ConsoleApiTest(unittest.TestCase):
    def test_list_configs_request(self):
        api, client = _api(_FakeResponse(200, {"configs": [], "count": 0}))
        response = asyncio.run(api.list_configs())
        self.assertTrue(response.ok)
        self.assertEqual(response.data["count"], 0)

        request, raise_error = client.requests[0]
        self.assertFalse(raise_error)
        self.assertEqual(request.url, "http://backend:8080/api/configs")
        self.assertEqual(request.method, "GET")
        self.assertIsNone(request.body)
        self.assertEqual(request.request_timeout, 5)
        self.assertEqual(request.headers["Content-Type"], "application/json")

    def test_create_config_sends_json_body(self):
        api, client = _api(_FakeResponse(200, {"message": "Configuration saved successfully", "sys_id": "s1"}))
        asyncio.run(api.create_config(SystemConfig("s1", "p", "k", "test")))
        request, _ = client.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(json.loads(request.body), {
            "sys_id": "s1", "product_id": "p", "rsa_private_key": "k", "environment": "test",
            "wx_woa_app_id": "", "wx_woa_path": "",
        })

    def test_delete_config_encodes_id(self):
        api, client = _api(_FakeResponse(200, {}))
        asyncio.run(api.delete_config("a b"))
        request, _ = client.requests[0]
        self.assertEqual(request.method, "DELETE")
        self.assertEqual(request.url, "http://backend:8080/api/config/a%20b")

    def test_non_2xx_is_a_response_not_an_error(self):
        api, _ = _api(_FakeResponse(404, {"error": "Configuration not found", "details": "missing"}))
        with self.assertLogs("huifu_console.api", level="WARNING"):
            response = asyncio.run(api.delete_config("s1"))
        self.assertFalse(response.ok)
        self.assertEqual(response.status, 404)
        self.assertEqual(response.details, "missing")

    def test_invalid_json_is_transport_error(self):
        api, _ = _api(_FakeResponse(502, b"<html>Bad Gateway</html>"))
        with self.assertRaises(ConsoleTransportError) as cm:
            asyncio.run(api.list_configs())
        self.assertEqual(cm.exception.url, "http://backend:8080/api/configs")

    def test_connection_failures_are_transport_errors(self):
        for error in (ConnectionRefusedError("refused"), httpclient.HTTPClientError(599, "Timeout")):
            api, _ = _api(error)
            with self.assertRaises(ConsoleTransportError):
                asyncio.run(api.list_configs())

    def test_non_object_json_is_wrapped(self):
        api, _ = _api(_FakeResponse(200, [1, 2]))
        response = asyncio.run(api.list_configs())
        self.assertEqual(response.data, {"result": [1, 2]})


class ApiResponseTest(unittest.TestCase):
    def test_ok_range(self):
        self.assertTrue(ApiResponse(204).ok)
        self.assertFalse(ApiResponse(301).ok)
        self.assertIsNone(ApiResponse(500, {"details": ""}).details)


if __name__ == "__main__":
    unittest.main()
