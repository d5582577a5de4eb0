import unittest
from unittest.mock import patch

from ore_deploy._upload import ORE_BASE_URL
from ore_deploy.config import DeployConfig
from ore_deploy.exceptions import ConfigurationError


class TestDeployConfig(unittest.TestCase):
    """Test cases for the DeployConfig dataclass."""

    def test_defaults(self):
        config = DeployConfig(plugin_id="myplugin", version="1.0.0")

        self.assertEqual(config.release_channel, "release")
        self.assertEqual(config.snapshot_channel, "snapshot")
        self.assertTrue(config.fallback_to_main_artifact)
        self.assertEqual(config.base_url, ORE_BASE_URL)
        self.assertIsNone(config.timeout)
        self.assertEqual(config.project_properties, {})
        config.validate()

    def test_validation_missing_plugin_id(self):
        config = DeployConfig(plugin_id="", version="1.0.0")

        with self.assertRaises(ConfigurationError) as cm:
            config.validate()

        self.assertIn("Plugin id is not defined", str(cm.exception))

    def test_validation_missing_version(self):
        config = DeployConfig(plugin_id="myplugin", version="  ")

        with self.assertRaises(ConfigurationError) as cm:
            config.validate()

        self.assertIn("Version is not defined", str(cm.exception))

    def test_validation_empty_channel(self):
        with self.assertRaises(ConfigurationError):
            DeployConfig(plugin_id="myplugin", version="1.0.0", snapshot_channel="").validate()
        with self.assertRaises(ConfigurationError):
            DeployConfig(plugin_id="myplugin", version="1.0.0", release_channel="").validate()

    def test_validation_timeout(self):
        with self.assertRaises(ConfigurationError):
            DeployConfig(plugin_id="myplugin", version="1.0.0", timeout=0).validate()

    def test_validation_invalid_url_scheme(self):
        config = DeployConfig(plugin_id="myplugin", version="1.0.0", base_url="ftp://ore.example.com")

        with self.assertRaises(ConfigurationError) as cm:
            config.validate()

        self.assertIn("must start with http:// or https://", str(cm.exception))

    def test_validation_missing_hostname(self):
        config = DeployConfig(plugin_id="myplugin", version="1.0.0", base_url="https://")

        with self.assertRaises(ConfigurationError) as cm:
            config.validate()

        self.assertIn("valid hostname", str(cm.exception))

    def test_validation_strips_trailing_slash(self):
        config = DeployConfig(plugin_id="myplugin", version="1.0.0", base_url="https://ore.example.com/")
        config.validate()
        self.assertEqual(config.base_url, "https://ore.example.com")

    @patch("ore_deploy.config.logger")
    def test_http_warning_for_remote_host(self, mock_logger):
        DeployConfig(plugin_id="myplugin", version="1.0.0", base_url="http://ore.example.com").validate()
        mock_logger.warning.assert_called_once()

    @patch("ore_deploy.config.logger")
    def test_no_http_warning_for_localhost(self, mock_logger):
        DeployConfig(plugin_id="myplugin", version="1.0.0", base_url="http://localhost:8080").validate()
        mock_logger.warning.assert_not_called()


if __name__ == "__main__":
    unittest.main()
