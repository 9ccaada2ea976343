#!/usr/bin/env python
"""控制台 Web 服务

用 Tornado 托管 PyWebIO 页面：``/`` 即配置控制台。

启动::

    huifu-console --port 9988 --api-base-url http://127.0.0.1:8080/api
"""

import argparse
import logging

import tornado.web
from tornado.ioloop import IOLoop
from pywebio.platform.tornado import webio_handler

from .config import config
from .logging_adapter import setup_console_logging
from .ui import console_page

logger = logging.getLogger(__name__)


def make_app(cdn=None, **kwargs):
    """Build the Tornado application serving the console page at ``/``."""
    if cdn is None:
        cdn = config.get("server.cdn") or True
    return tornado.web.Application(
        [(r"/", webio_handler(console_page, cdn=cdn))],
        **kwargs
    )


def build_parser():
    parser = argparse.ArgumentParser(prog="huifu-console", description="汇付支付配置管理控制台")
    parser.add_argument("--host", help="监听地址")
    parser.add_argument("--port", type=int, help="监听端口")
    parser.add_argument("--api-base-url", help="后端API基础URL，如 http://127.0.0.1:8080/api")
    parser.add_argument("--refresh-interval", type=float, help="配置列表自动刷新周期（秒）")
    parser.add_argument("--log-level", help="日志级别")
    return parser


def apply_args(args):
    overrides = {
        "server.host": args.host,
        "server.port": args.port,
        "api.base_url": args.api_base_url,
        "ui.refresh_interval": args.refresh_interval,
        "log.level": args.log_level,
    }
    for path, value in overrides.items():
        if value is not None:
            config.set(path, value)


def main(argv=None):
    args = build_parser().parse_args(argv)
    apply_args(args)
    setup_console_logging(config.get("log.level"))

    server = config.get_server_config()
    app = make_app()
    app.listen(server["port"], address=server["host"])
    logger.info(f"控制台已启动: http://{server['host']}:{server['port']}/")
    logger.info(f"当前配置: {config.describe()}")
    IOLoop.current().start()


if __name__ == "__main__":
    main()
