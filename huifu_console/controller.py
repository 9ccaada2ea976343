"""Console actions.

Each action takes ``ctx``, the per-session context built by
``ui.page_ctx``: the session's ``UiState`` and ``ConsoleApi`` plus
the page callables that read and paint the forms. Actions never touch
PyWebIO directly, which keeps them testable with a plain dict of fakes.

Alerts, the loading flag and the selected ``sys_id`` always go through
``UiState`` first and are painted second.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping
from urllib.parse import parse_qs

from pymaybe import maybe

from . import messages
from .commands import validate_selection, validate_wechat_form, validate_wechat_query
from .exceptions import ConsoleTransportError
from .models import Alert, Severity, SystemConfig

logger = logging.getLogger(__name__)

CONFIG_FIELDS = ["sys_id", "product_id", "rsa_private_key", "environment"]
WECHAT_FIELDS = ["wx_sys_id", "huifu_id", "wx_woa_app_id", "wx_woa_path", "fee_type"]
SELECT_FIELD = "wx_sys_id"
RSA_FIELD = "rsa_private_key"
WECHAT_SCOPE = "wechat_form"


# ---- alert / loading ----

def show_alert(ctx, message, severity="info"):
    alert = ctx["state"].present(Alert(str(message), Severity(severity)))
    ctx["render_alert"](alert)
    return alert


def hide_alert(ctx):
    ctx["state"].clear()
    ctx["render_alert"](None)


def show_loading(ctx, visible=True):
    ctx["state"].set_busy(visible)
    ctx["render_loading"](bool(visible))


# ---- selection ----

def set_selection(ctx, sys_id):
    ctx["state"].select(sys_id)
    ctx["set_field"](SELECT_FIELD, sys_id or "")


def sync_selection(ctx, sys_id):
    """Mirror a change made directly on the select control."""
    ctx["state"].select(sys_id)


def select_config(ctx, sys_id):
    set_selection(ctx, sys_id)
    show_alert(ctx, f"已选择配置: {sys_id}", "success")
    ctx["scroll_to"](WECHAT_SCOPE)


# ---- config list ----

def _parse_listing(data: Mapping[str, Any]) -> List[SystemConfig]:
    items = data.get("configs") or []
    if not isinstance(items, list):
        raise ConsoleTransportError(f"configs 字段格式错误: {type(items).__name__}")
    return [SystemConfig.from_listing(item) for item in items if isinstance(item, Mapping)]


def render_configs(ctx, configs: List[SystemConfig]):
    state = ctx["state"]
    known = {c.sys_id for c in configs}
    if state.selected_sys_id not in known:
        state.select("")
    ctx["render_config_list"](configs)
    ctx["render_selector"](messages.selector_options(configs), state.selected_sys_id)


async def load_configs(ctx, periodic=False):
    """Fetch the config list and repaint the list view and the selector.

    Returns True when this call published a fresh list.
    """
    state = ctx["state"]
    token = state.begin_refresh(periodic=periodic)
    if token is None:
        logger.debug("上一次刷新尚未完成，跳过自动刷新")
        return False

    show_loading(ctx, True)
    try:
        response = await ctx["api"].list_configs()
        if not response.ok:
            show_alert(ctx, messages.failure_text("加载配置列表失败", response.data), "error")
            return False
        configs = _parse_listing(response.data)
        if not state.publish_configs(token, configs):
            logger.debug(f"刷新结果已过期，丢弃: token={token}")
            return False
        render_configs(ctx, configs)
        return True
    except ConsoleTransportError:
        logger.exception("加载配置失败")
        show_alert(ctx, "加载配置列表失败", "error")
        return False
    finally:
        state.end_refresh(token)
        show_loading(ctx, False)


async def delete_config(ctx, sys_id):
    if not await ctx["confirm"](f"确定要删除配置 {sys_id} 吗？此操作不可恢复。"):
        return False

    show_loading(ctx, True)
    try:
        response = await ctx["api"].delete_config(sys_id)
        if not response.ok:
            show_alert(ctx, messages.failure_text("删除失败", response.data), "error")
            return False
        show_alert(ctx, f"配置 {sys_id} 已删除", "success")
        await load_configs(ctx)
        if ctx["state"].clear_selection_if(sys_id):
            ctx["set_field"](SELECT_FIELD, "")
        logger.info(f"配置已删除: sys_id={sys_id}")
        return True
    except ConsoleTransportError:
        logger.exception(f"删除配置失败: sys_id={sys_id}")
        show_alert(ctx, messages.NETWORK_ERROR, "error")
        return False
    finally:
        show_loading(ctx, False)


async def save_config(ctx):
    form = await ctx["read_form"](CONFIG_FIELDS)
    config = SystemConfig.from_form(form)

    show_loading(ctx, True)
    try:
        response = await ctx["api"].create_config(config)
        if not response.ok:
            show_alert(ctx, messages.failure_text("保存失败", response.data), "error")
            logger.error(
                "保存失败详情",
                extra={"console_extra": {"sys_id": config.sys_id, "status": response.status, "response": response.data}},
            )
            return False
        show_alert(ctx, "配置保存成功！", "success")
        ctx["reset_config_form"]()
        await load_configs(ctx)
        # the selector is repainted by the reload; select the new entry once it has settled
        ctx["call_later"](ctx["settings"]["select_delay"], lambda: set_selection(ctx, config.sys_id))
        logger.info(f"配置已保存: sys_id={config.sys_id}, environment={config.environment}")
        return True
    except ConsoleTransportError:
        logger.exception(f"保存配置失败: sys_id={config.sys_id}")
        show_alert(ctx, messages.NETWORK_ERROR, "error")
        return False
    finally:
        show_loading(ctx, False)


async def test_config(ctx):
    form = await ctx["read_form"]([SELECT_FIELD])
    ok, sys_id = validate_selection(form.get(SELECT_FIELD))
    if not ok:
        show_alert(ctx, sys_id, "error")
        return False

    show_loading(ctx, True)
    try:
        response = await ctx["api"].test_config(sys_id)
        if not response.ok:
            show_alert(ctx, messages.failure_text("测试失败", response.data), "error")
            return False
        show_alert(ctx, f"✅ {response.data.get('message') or '配置有效'}", "success")
        return True
    except ConsoleTransportError:
        logger.exception(f"测试配置失败: sys_id={sys_id}")
        show_alert(ctx, messages.NETWORK_ERROR, "error")
        return False
    finally:
        show_loading(ctx, False)


async def generate_test_key(ctx):
    try:
        response = await ctx["api"].generate_test_key()
    except ConsoleTransportError:
        logger.exception("生成测试密钥失败")
        show_alert(ctx, "生成失败，请手动输入密钥", "error")
        return False

    key = response.data.get("private_key") if response.ok else None
    if not key:
        logger.warning(f"后端未返回测试密钥，使用内置测试密钥: status={response.status}")
        key = messages.STATIC_TEST_KEY
    ctx["set_field"](RSA_FIELD, key)
    show_alert(ctx, "已生成测试密钥（仅供测试，请勿用于生产环境）", "info")
    return True


def clear_form(ctx):
    ctx["reset_config_form"]()
    show_alert(ctx, "表单已清空", "info")


# ---- wechat merchant ----

async def submit_wechat_config(ctx):
    form = await ctx["read_form"](WECHAT_FIELDS)
    ok, merchant = validate_wechat_form(form)
    if not ok:
        show_alert(ctx, merchant, "error")
        return False

    show_loading(ctx, True)
    try:
        response = await ctx["api"].configure_wechat(merchant)
        if not response.ok:
            show_alert(ctx, messages.failure_text("配置失败", response.data), "error")
            return False
        show_alert(ctx, messages.wechat_success_message(response.data), "success")
        logger.info(f"微信商户配置成功: sys_id={merchant.sys_id}, huifu_id={merchant.huifu_id}")
        return True
    except ConsoleTransportError:
        logger.exception(f"配置微信商户失败: sys_id={merchant.sys_id}")
        show_alert(ctx, messages.NETWORK_ERROR, "error")
        return False
    finally:
        show_loading(ctx, False)


async def query_wechat_config(ctx):
    form = await ctx["read_form"]([SELECT_FIELD, "huifu_id"])
    ok, result = validate_wechat_query(form.get(SELECT_FIELD), form.get("huifu_id"))
    if not ok:
        show_alert(ctx, result, "error")
        return False
    sys_id, huifu_id = result

    show_loading(ctx, True)
    try:
        response = await ctx["api"].query_wechat(sys_id, huifu_id)
        if not response.ok:
            show_alert(ctx, messages.failure_text("查询失败", response.data), "error")
            return False
        show_alert(ctx, messages.query_result_message(response.data), "success")
        return True
    except ConsoleTransportError:
        logger.exception(f"查询配置失败: sys_id={sys_id}, huifu_id={huifu_id}")
        show_alert(ctx, "查询失败，请检查网络连接", "error")
        return False
    finally:
        show_loading(ctx, False)


# ---- page helpers ----

async def normalize_rsa_key(ctx):
    """Wrap a pasted bare key body in PEM boundary lines."""
    form = await ctx["read_form"]([RSA_FIELD])
    value = form.get(RSA_FIELD) or ""
    if not value.strip():
        return value
    wrapped = messages.wrap_pem(value)
    if wrapped != value:
        ctx["set_field"](RSA_FIELD, wrapped)
    return wrapped


def prefill_from_query(ctx, query: str) -> Dict[str, str]:
    """Fill the config form from ``?sys_id=..&product_id=..`` style parameters."""
    params = parse_qs((query or "").lstrip("?"), keep_blank_values=True)
    filled = {}
    for name in CONFIG_FIELDS:
        values = maybe(params)[name].or_else([])
        if values:
            filled[name] = values[0]
            ctx["set_field"](name, values[0])
    return filled
