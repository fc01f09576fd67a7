import json
import os
import shutil
import unittest
from pathlib import Path
from unittest.mock import patch

from hn_tui import config

TEST_DIR = Path("/tmp/test_hn_config")
TEST_CONFIG_PATH = str(TEST_DIR / ".config/hn/config.json")


class TestConfigLoading(unittest.TestCase):
    def setUp(self):
        os.makedirs(TEST_DIR, exist_ok=True)

    def tearDown(self):
        shutil.rmtree(TEST_DIR, ignore_errors=True)

    @patch("hn_tui.config.CONFIG_PATH", new=TEST_CONFIG_PATH)
    def test_default_config_is_written(self):
        self.assertFalse(os.path.exists(TEST_CONFIG_PATH))

        loaded = config.load_config()

        self.assertTrue(os.path.exists(TEST_CONFIG_PATH))
        with open(TEST_CONFIG_PATH, "r") as f:
            self.assertEqual(json.load(f), config.DEFAULT_CONFIG)
        self.assertEqual(loaded, config.DEFAULT_CONFIG)
        self.assertEqual(config.source_config(loaded)["limit"], 30)

    @patch("hn_tui.config.CONFIG_PATH", new=TEST_CONFIG_PATH)
    def test_user_values_override_defaults(self):
        os.makedirs(os.path.dirname(TEST_CONFIG_PATH), exist_ok=True)
        with open(TEST_CONFIG_PATH, "w") as f:
            json.dump({"theme": "nord", "sources": {"hackernews": {"limit": 10}}}, f)

        loaded = config.load_config()

        self.assertEqual(loaded["theme"], "nord")
        hn = config.source_config(loaded)
        self.assertEqual(hn["limit"], 10)
        self.assertEqual(hn["base_url"], config.API_BASE_URL)
        self.assertEqual(hn["timeout"], config.HTTP_TIMEOUT)

    @patch("hn_tui.config.CONFIG_PATH", new=TEST_CONFIG_PATH)
    def test_corrupt_config_falls_back_to_defaults(self):
        os.makedirs(os.path.dirname(TEST_CONFIG_PATH), exist_ok=True)
        with open(TEST_CONFIG_PATH, "w") as f:
            f.write("{not json")

        self.assertEqual(config.load_config(), config.DEFAULT_CONFIG)

    @patch("hn_tui.config.CONFIG_PATH", new=TEST_CONFIG_PATH)
    def test_save_config_round_trip(self):
        config.save_config({"theme": "gruvbox"})
        self.assertEqual(config.load_config()["theme"], "gruvbox")

    def test_defaults_are_not_mutated_by_merge(self):
        merged = config._merge(config.DEFAULT_CONFIG, {"sources": {"hackernews": {"limit": 5}}})
        merged["sources"]["hackernews"]["timeout"] = 1
        self.assertEqual(config.DEFAULT_CONFIG["sources"]["hackernews"]["limit"], 30)
        self.assertEqual(config.DEFAULT_CONFIG["sources"]["hackernews"]["timeout"], 15)


if __name__ == "__main__":
    unittest.main()
