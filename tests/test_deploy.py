"""
Tests for the deploy orchestration.

Tests cover:
- prepare_upload resolution without network access
- End-to-end deploy against a mocked Ore endpoint
- Failures raised before any network call
"""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

import requests
import responses

from ore_deploy._upload import UploadResult
from ore_deploy.artifacts import BuildArtifact, BuildOutputs
from ore_deploy.config import DeployConfig
from ore_deploy.deploy import deploy, prepare_upload, publish
from ore_deploy.exceptions import (
    ConfigLoadError,
    MissingApiKeyError,
    MissingArtifactError,
    MissingSignatureError,
    TransportError,
    UnreadableFileError,
    UploadRejected,
)

BASE_URL = "https://ore.example.com"
UPLOAD_URL = f"{BASE_URL}/api/projects/myplugin/versions/1.0.0"


class DeployTestCase(unittest.TestCase):
    """Shared build output fixtures."""

    def setUp(self):
        self._tmp_dir = tempfile.TemporaryDirectory()
        tmp = Path(self._tmp_dir.name)
        self.jar = tmp / "myplugin-1.0.0.jar"
        self.sig = tmp / "myplugin-1.0.0.jar.asc"
        self.jar.write_bytes(b"jar-bytes")
        self.sig.write_bytes(b"sig-bytes")

    def tearDown(self):
        self._tmp_dir.cleanup()

    def outputs(self, is_snapshot=False, with_signature=True):
        main = BuildArtifact(classifier=None, type="jar", file=self.jar, is_snapshot=is_snapshot)
        attached = []
        if with_signature:
            attached.append(BuildArtifact(classifier=None, type="jar.asc", file=self.sig, is_snapshot=is_snapshot))
        return BuildOutputs(main_artifact=main, attached=attached)

    def config(self, **overrides):
        params = dict(
            plugin_id="myplugin",
            version="1.0.0",
            base_url=BASE_URL,
            project_properties={"ore.deploy.apikey.myplugin": "property-key"},
        )
        params.update(overrides)
        return DeployConfig(**params)


class TestPrepareUpload(DeployTestCase):
    """Tests for prepare_upload."""

    def test_snapshot_request(self):
        request = prepare_upload(self.config(), self.outputs(is_snapshot=True))

        self.assertEqual(request.channel, "snapshot")
        self.assertEqual(request.forum_post, "false")
        self.assertEqual(request.recommended, "false")
        self.assertEqual(request.api_key, "property-key")
        self.assertEqual(request.artifact_file, self.jar)
        self.assertEqual(request.signature_file, self.sig)

    def test_release_request(self):
        request = prepare_upload(self.config(), self.outputs(is_snapshot=False))

        self.assertEqual(request.channel, "release")
        self.assertEqual(request.forum_post, "true")

    def test_custom_channels(self):
        config = self.config(release_channel="Stable", snapshot_channel="Beta")
        self.assertEqual(prepare_upload(config, self.outputs(is_snapshot=True)).channel, "Beta")
        self.assertEqual(prepare_upload(config, self.outputs(is_snapshot=False)).channel, "Stable")

    def test_file_names_default_to_artifact_name(self):
        request = prepare_upload(self.config(), self.outputs())

        self.assertEqual(request.artifact_file_name, "myplugin-1.0.0.jar")
        self.assertEqual(request.signature_file_name, "myplugin-1.0.0.jar.sig")

    def test_configured_file_name(self):
        request = prepare_upload(self.config(file_name="MyPlugin.jar"), self.outputs())

        self.assertEqual(request.artifact_file_name, "MyPlugin.jar")
        self.assertEqual(request.signature_file_name, "MyPlugin.jar.sig")

    def test_explicit_key_wins(self):
        request = prepare_upload(self.config(api_key="X"), self.outputs())
        self.assertEqual(request.api_key, "X")

    def test_missing_api_key(self):
        with self.assertRaises(MissingApiKeyError):
            prepare_upload(self.config(project_properties={}), self.outputs())

    def test_missing_signature(self):
        with self.assertRaises(MissingSignatureError):
            prepare_upload(self.config(), self.outputs(with_signature=False))

    def test_unreadable_signature(self):
        self.sig.unlink()
        with self.assertRaises(UnreadableFileError) as ctx:
            prepare_upload(self.config(), self.outputs())
        self.assertEqual(ctx.exception.path, self.sig)

    def test_readability_checked_before_api_key(self):
        self.jar.unlink()
        with self.assertRaises(UnreadableFileError):
            prepare_upload(self.config(project_properties={}), self.outputs())


class TestDeploy(DeployTestCase):
    """End-to-end tests for deploy."""

    @responses.activate
    def test_snapshot_end_to_end(self):
        responses.add(responses.POST, UPLOAD_URL, status=201)

        result = deploy(self.config(), self.outputs(is_snapshot=True))

        self.assertTrue(result.success)
        self.assertEqual(len(responses.calls), 1)
        request = responses.calls[0].request
        self.assertEqual(request.url, UPLOAD_URL)
        self.assertEqual(request.method, "POST")
        self.assertRegex(request.body, rb'name="channel"\r\nContent-Type: text/plain\r\n\r\nsnapshot\r\n')
        self.assertRegex(request.body, rb'name="forumPost"\r\nContent-Type: text/plain\r\n\r\nfalse\r\n')
        self.assertRegex(request.body, rb'name="recommended"\r\nContent-Type: text/plain\r\n\r\nfalse\r\n')
        self.assertRegex(request.body, rb'name="apiKey"\r\nContent-Type: text/plain\r\n\r\nproperty-key\r\n')

    @responses.activate
    def test_rejected_upload_raises(self):
        responses.add(responses.POST, UPLOAD_URL, status=400, body="bad request")

        with self.assertRaises(UploadRejected) as ctx:
            deploy(self.config(), self.outputs())

        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.response_body, "bad request")
        self.assertIn("bad request", str(ctx.exception))

    @responses.activate
    def test_dropped_connection_raises(self):
        responses.add(responses.POST, UPLOAD_URL, body=requests.exceptions.ConnectionError("reset"))

        with self.assertRaises(TransportError):
            deploy(self.config(), self.outputs())

    @responses.activate
    def test_no_retry_after_failure(self):
        responses.add(responses.POST, UPLOAD_URL, status=503, body="unavailable")

        with self.assertRaises(UploadRejected):
            deploy(self.config(), self.outputs())

        self.assertEqual(len(responses.calls), 1)

    @patch("ore_deploy.deploy.OreUploadClient")
    def test_missing_artifact_makes_no_network_call(self, mock_client_cls):
        outputs = BuildOutputs(main_artifact=None, attached=[])

        with self.assertRaises(MissingArtifactError):
            deploy(self.config(classifier="shaded", fallback_to_main_artifact=False), outputs)

        mock_client_cls.assert_not_called()

    @patch("ore_deploy.deploy.OreUploadClient")
    def test_missing_signature_makes_no_network_call(self, mock_client_cls):
        with self.assertRaises(MissingSignatureError):
            deploy(self.config(), self.outputs(with_signature=False))

        mock_client_cls.assert_not_called()

    @patch("ore_deploy.deploy.OreUploadClient")
    def test_permission_denied_makes_no_network_call(self, mock_client_cls):
        with patch("ore_deploy.artifacts.os.access", return_value=False):
            with self.assertRaises(UnreadableFileError):
                deploy(self.config(), self.outputs())

        mock_client_cls.assert_not_called()

    @patch("ore_deploy.deploy.OreUploadClient")
    def test_broken_lookup_file_makes_no_network_call(self, mock_client_cls):
        lookup = Path(self._tmp_dir.name) / "keys.properties"
        lookup.write_bytes(b"myplugin=\xff\n")

        with self.assertRaises(ConfigLoadError):
            deploy(self.config(project_properties={}, api_key_lookup=lookup), self.outputs())

        mock_client_cls.assert_not_called()

    @patch("ore_deploy.deploy.OreUploadClient")
    def test_client_uses_configured_timeout(self, mock_client_cls):
        mock_client_cls.return_value.upload.return_value = UploadResult.success_result()

        deploy(self.config(), self.outputs())
        mock_client_cls.assert_called_with(base_url=BASE_URL, timeout=None)

        deploy(self.config(timeout=15.0), self.outputs())
        mock_client_cls.assert_called_with(base_url=BASE_URL, timeout=15.0)


class TestPublish(DeployTestCase):
    """Tests for publish."""

    def test_publish_returns_success(self):
        client = Mock()
        client.upload.return_value = UploadResult.success_result()
        request = prepare_upload(self.config(), self.outputs())

        result = publish(request, client)

        self.assertTrue(result.success)
        client.upload.assert_called_once_with(request)

    def test_publish_raises_on_rejection(self):
        client = Mock()
        client.upload.return_value = UploadResult.rejected_result(403, "403 Forbidden", "bad key")
        request = prepare_upload(self.config(), self.outputs())

        with self.assertRaises(UploadRejected) as ctx:
            publish(request, client)

        self.assertEqual(ctx.exception.status_code, 403)
        client.upload.assert_called_once_with(request)


if __name__ == "__main__":
    unittest.main()
