"""Pure builders turning form input into backend requests.

Nothing here touches the network or the page: each builder returns an
``ApiCommand`` that ``ConsoleApi.dispatch`` executes, and validators follow
the ``(ok, value_or_message)`` convention.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import quote

from .models import SystemConfig, WeChatMerchantConfig


@dataclass(frozen=True)
class ApiCommand:
    name: str
    method: str
    path: str
    body: Optional[Dict[str, Any]] = field(default=None)


def list_configs() -> ApiCommand:
    return ApiCommand("list_configs", "GET", "/configs")


def generate_test_key() -> ApiCommand:
    return ApiCommand("generate_test_key", "GET", "/generate-test-key")


def create_config(config: SystemConfig) -> ApiCommand:
    return ApiCommand("create_config", "POST", "/config", config.to_payload())


def delete_config(sys_id: str) -> ApiCommand:
    return ApiCommand("delete_config", "DELETE", "/config/" + quote(str(sys_id), safe=""))


def test_config(sys_id: str) -> ApiCommand:
    return ApiCommand("test_config", "POST", "/test-config", {"sys_id": sys_id})


def configure_wechat(merchant: WeChatMerchantConfig) -> ApiCommand:
    return ApiCommand("configure_wechat", "POST", "/wechat-config", merchant.to_payload())


def query_wechat(sys_id: str, huifu_id: str) -> ApiCommand:
    return ApiCommand("query_wechat", "POST", "/wechat-config-query", {"sys_id": sys_id, "huifu_id": huifu_id})


def validate_selection(sys_id) -> Tuple[bool, str]:
    if not sys_id:
        return False, "请先选择系统配置"
    return True, sys_id


def validate_wechat_form(form: Mapping[str, Any]) -> Tuple[bool, Any]:
    """Return ``(True, WeChatMerchantConfig)`` or ``(False, message)``."""
    merchant = WeChatMerchantConfig.from_form(form)
    ok, msg = validate_selection(merchant.sys_id)
    if not ok:
        return False, msg
    if not merchant.fee_type:
        return False, "请选择费率类型"
    return True, merchant


def validate_wechat_query(sys_id, huifu_id) -> Tuple[bool, Any]:
    """Return ``(True, (sys_id, huifu_id))`` or ``(False, message)``."""
    ok, msg = validate_selection(sys_id)
    if not ok:
        return False, msg
    if not huifu_id:
        return False, "请输入汇付ID"
    return True, (msg, huifu_id)
