"""HTTP client for the configuration backend.

Every request goes through ``ConsoleApi.dispatch``, which sends an
``ApiCommand`` with Tornado's ``AsyncHTTPClient`` and returns an
``ApiResponse``. A non-2xx status is not an exception: it comes back as a
response with ``ok == False`` so the caller can show the server's
``details``. Only transport problems (connection refused, timeout, a body
that is not JSON) raise ``ConsoleTransportError``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from tornado import httpclient
from tornado.escape import json_encode

from . import commands
from .commands import ApiCommand
from .exceptions import ConsoleTransportError
from .models import SystemConfig, WeChatMerchantConfig

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


@dataclass
class ApiResponse:
    status: int
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def details(self) -> Optional[str]:
        value = self.data.get("details")
        return str(value) if value else None


def _decode_body(body: bytes, url: str, method: str) -> Dict[str, Any]:
    text = (body or b"").decode("utf-8", errors="replace").strip()
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ConsoleTransportError(f"响应不是合法的JSON: {e}", method=method, url=url) from e
    if isinstance(data, dict):
        return data
    return {"result": data}


class ConsoleApi:
    """Async client bound to one backend base URL, e.g. ``http://127.0.0.1:8080/api``."""

    def __init__(self, base_url: str, request_timeout: float = 30.0, http_client=None):
        self.base_url = base_url.rstrip('/')
        self.request_timeout = request_timeout
        self._http_client = http_client

    @property
    def http_client(self):
        if self._http_client is None:
            self._http_client = httpclient.AsyncHTTPClient()
        return self._http_client

    def url_for(self, command: ApiCommand) -> str:
        return self.base_url + command.path

    async def dispatch(self, command: ApiCommand) -> ApiResponse:
        url = self.url_for(command)
        request = httpclient.HTTPRequest(
            url,
            method=command.method,
            headers=dict(JSON_HEADERS),
            body=None if command.body is None else json_encode(command.body),
            request_timeout=self.request_timeout,
        )
        logger.debug(f"{command.method} {url}", extra={"console_extra": {"command": command.name}})
        try:
            response = await self.http_client.fetch(request, raise_error=False)
        except (OSError, httpclient.HTTPClientError) as e:
            raise ConsoleTransportError(f"请求失败: {e}", method=command.method, url=url) from e

        data = _decode_body(response.body, url, command.method)
        result = ApiResponse(status=response.code, data=data)
        if not result.ok:
            logger.warning(
                f"{command.method} {url} -> {response.code}",
                extra={"console_extra": {"command": command.name, "details": result.details}},
            )
        return result

    async def list_configs(self) -> ApiResponse:
        return await self.dispatch(commands.list_configs())

    async def generate_test_key(self) -> ApiResponse:
        return await self.dispatch(commands.generate_test_key())

    async def create_config(self, config: SystemConfig) -> ApiResponse:
        return await self.dispatch(commands.create_config(config))

    async def delete_config(self, sys_id: str) -> ApiResponse:
        return await self.dispatch(commands.delete_config(sys_id))

    async def test_config(self, sys_id: str) -> ApiResponse:
        return await self.dispatch(commands.test_config(sys_id))

    async def configure_wechat(self, merchant: WeChatMerchantConfig) -> ApiResponse:
        return await self.dispatch(commands.configure_wechat(merchant))

    async def query_wechat(self, sys_id: str, huifu_id: str) -> ApiResponse:
        return await self.dispatch(commands.query_wechat(sys_id, huifu_id))
