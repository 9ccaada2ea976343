import os
import unittest
from unittest.mock import patch

import tornado.web

from huifu_console import server
from huifu_console.config import config


class ServerTest(unittest.TestCase):
    def tearDown(self):
        config.reset()

    def test_make_app_mounts_console(self):
        app = server.make_app(cdn=False)
        self.assertIsInstance(app, tornado.web.Application)

    def test_args_override_config(self):
        args = server.build_parser().parse_args(
            ["--port", "9000", "--api-base-url", "http://10.0.0.2:8080/api", "--refresh-interval", "5"]
        )
        server.apply_args(args)
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config.get("server.port"), 9000)
            self.assertEqual(config.get_api_config()["base_url"], "http://10.0.0.2:8080/api")
            self.assertEqual(config.get_ui_config()["refresh_interval"], 5.0)
            self.assertEqual(config.get("server.host"), "127.0.0.1")


if __name__ == "__main__":
    unittest.main()
