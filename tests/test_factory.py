from unittest.mock import patch
import pytest

from stratus.factory import universal_factory
from stratus.aws.compute import Compute as EC2Compute
from stratus.gcp.compute import Compute as GCPCompute
from stratus.base.exceptions import ConfigurationError


class TestUniversalFactory:
    def test_aws_compute(self):
        result = universal_factory("compute", "aws", {
            "aws_access_key_id": "k",
            "aws_secret_access_key": "s",
            "host": "ec2.us-west-1.amazonaws.com",
        })
        assert isinstance(result, EC2Compute)
        assert result.client.config.host == "ec2.us-west-1.amazonaws.com"

    @patch("stratus.gcp.compute.compute_v1")
    def test_gcp_compute(self, mock_compute):
        result = universal_factory("compute", "gcp", {"project_id": "p"})
        assert isinstance(result, GCPCompute)
        mock_compute.BackendServicesClient.assert_called_once_with(credentials=None)

    def test_aws_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
        monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            universal_factory("compute", "aws", {})

    def test_gcp_missing_project(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
        monkeypatch.delenv("GCLOUD_PROJECT", raising=False)
        with pytest.raises(ConfigurationError):
            universal_factory("compute", "gcp", {})

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported cloud provider"):
            universal_factory("compute", "azure", {})

    def test_unsupported_service(self):
        with pytest.raises(ValueError, match="Unsupported service"):
            universal_factory("storage", "aws", {})
