"""Records exchanged with the configuration backend."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping


PRODUCTION = "production"
TEST = "test"

ENVIRONMENT_OPTIONS = [
    {"label": "测试环境", "value": TEST},
    {"label": "生产环境", "value": PRODUCTION},
]

FEE_TYPE_OPTIONS = [
    {"label": "请选择费率类型", "value": ""},
    {"label": "01 - 标准费率线上", "value": "01"},
    {"label": "02 - 标准费率线下", "value": "02"},
]


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Alert:
    message: str
    severity: Severity = Severity.INFO


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


@dataclass
class SystemConfig:
    sys_id: str
    product_id: str = ""
    rsa_private_key: str = ""
    environment: str = TEST
    wx_woa_app_id: str = ""
    wx_woa_path: str = ""

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "SystemConfig":
        # the WeChat fields are filled later by the merchant form
        return cls(
            sys_id=_text(form, "sys_id"),
            product_id=_text(form, "product_id"),
            rsa_private_key=_text(form, "rsa_private_key"),
            environment=_text(form, "environment"),
        )

    @classmethod
    def from_listing(cls, item: Mapping[str, Any]) -> "SystemConfig":
        return cls(
            sys_id=_text(item, "sys_id"),
            product_id=_text(item, "product_id"),
            environment=_text(item, "environment"),
        )

    def to_payload(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class WeChatMerchantConfig:
    sys_id: str
    huifu_id: str = ""
    wx_woa_app_id: str = ""
    wx_woa_path: str = ""
    fee_type: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "WeChatMerchantConfig":
        return cls(
            sys_id=_text(form, "wx_sys_id"),
            huifu_id=_text(form, "huifu_id"),
            wx_woa_app_id=_text(form, "wx_woa_app_id"),
            wx_woa_path=_text(form, "wx_woa_path"),
            fee_type=_text(form, "fee_type"),
        )

    def to_payload(self) -> Dict[str, str]:
        return asdict(self)
