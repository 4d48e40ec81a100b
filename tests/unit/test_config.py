"""Unit tests for resource_probe.config: mapping/YAML/env loading,
merging, and boto3 client construction.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from resource_probe.config import DEFAULT_REGION, LOCALSTACK_ENDPOINT, ClientConfig
from resource_probe.errors import ConfigError


# ===========================================================================
# from_mapping
# ===========================================================================


class TestFromMapping:
    def test_empty_mapping_gives_defaults(self) -> None:
        assert ClientConfig.from_mapping({}) == ClientConfig()

    def test_valid_mapping(self) -> None:
        config = ClientConfig.from_mapping(
            {"region": "eu-west-1", "localstack": True, "read_timeout": 5}
        )
        assert config.region == "eu-west-1"
        assert config.localstack is True
        assert config.read_timeout == 5

    def test_none_values_are_ignored(self) -> None:
        assert ClientConfig.from_mapping({"region": None}).region == DEFAULT_REGION

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ConfigError, match="regoin"):
            ClientConfig.from_mapping({"regoin": "us-east-1"})

    def test_wrong_type_rejected(self) -> None:
        with pytest.raises(ConfigError, match="region"):
            ClientConfig.from_mapping({"region": 5})

    def test_bool_rejected_for_timeout(self) -> None:
        with pytest.raises(ConfigError, match="connect_timeout"):
            ClientConfig.from_mapping({"connect_timeout": True})

    def test_string_rejected_for_localstack(self) -> None:
        with pytest.raises(ConfigError):
            ClientConfig.from_mapping({"localstack": "yes"})

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            ClientConfig.from_mapping(["region"])  # type: ignore[arg-type]


# ===========================================================================
# from_yaml / merged_with_yaml
# ===========================================================================


class TestYaml:
    def test_loads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "probe.yaml"
        path.write_text("region: ap-southeast-2\nendpoint_url: http://emulator:4566\n", encoding="utf-8")
        config = ClientConfig.from_yaml(path)
        assert config.region == "ap-southeast-2"
        assert config.endpoint_url == "http://emulator:4566"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert ClientConfig.from_yaml(path) == ClientConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            ClientConfig.from_yaml(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("region: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            ClientConfig.from_yaml(path)

    def test_list_document_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- us-east-1\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ClientConfig.from_yaml(path)

    def test_merged_with_yaml_keeps_unspecified_fields(self, tmp_path: Path) -> None:
        path = tmp_path / "probe.yaml"
        path.write_text("read_timeout: 3\n", encoding="utf-8")
        base = ClientConfig(region="eu-central-1", localstack=True)
        merged = base.merged_with_yaml(path)
        assert merged.region == "eu-central-1"
        assert merged.localstack is True
        assert merged.read_timeout == 3

    def test_merged_with_yaml_validates(self, tmp_path: Path) -> None:
        path = tmp_path / "probe.yaml"
        path.write_text("bogus: 1\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ClientConfig().merged_with_yaml(path)


# ===========================================================================
# from_env / merged
# ===========================================================================


class TestFromEnv:
    def test_defaults_with_empty_environment(self) -> None:
        config = ClientConfig.from_env({})
        assert config.region == DEFAULT_REGION
        assert config.profile is None
        assert config.localstack is False

    def test_reads_aws_variables(self) -> None:
        config = ClientConfig.from_env(
            {
                "AWS_REGION": "us-west-2",
                "AWS_PROFILE": "sandbox",
                "AWS_ENDPOINT_URL": "http://localhost:9000",
            }
        )
        assert config.region == "us-west-2"
        assert config.profile == "sandbox"
        assert config.endpoint_url == "http://localhost:9000"

    def test_falls_back_to_default_region_variable(self) -> None:
        assert ClientConfig.from_env({"AWS_DEFAULT_REGION": "sa-east-1"}).region == "sa-east-1"

    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_localstack_truthy_values(self, value: str) -> None:
        assert ClientConfig.from_env({"RESOURCE_PROBE_LOCALSTACK": value}).localstack is True

    def test_localstack_other_values(self) -> None:
        assert ClientConfig.from_env({"RESOURCE_PROBE_LOCALSTACK": "0"}).localstack is False

    def test_reads_process_environment_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AWS_REGION", "eu-north-1")
        assert ClientConfig.from_env().region == "eu-north-1"


class TestMerged:
    def test_none_overrides_ignored(self) -> None:
        config = ClientConfig(region="eu-west-1")
        assert config.merged(region=None, profile=None) is config

    def test_overrides_applied(self) -> None:
        assert ClientConfig().merged(region="us-west-1").region == "us-west-1"

    def test_unknown_override_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ClientConfig().merged(colour="blue")


# ===========================================================================
# Endpoints, sessions, clients
# ===========================================================================


class TestClientFactory:
    def test_no_endpoint_by_default(self) -> None:
        assert ClientConfig().effective_endpoint() is None

    def test_localstack_endpoint(self) -> None:
        assert ClientConfig(localstack=True).effective_endpoint() == LOCALSTACK_ENDPOINT

    def test_explicit_endpoint_wins_over_localstack(self) -> None:
        config = ClientConfig(localstack=True, endpoint_url="http://emulator:4566")
        assert config.effective_endpoint() == "http://emulator:4566"

    def test_localstack_session_uses_test_credentials(self) -> None:
        credentials = ClientConfig(localstack=True).session().get_credentials()
        assert credentials is not None
        assert credentials.access_key == "test"
        assert credentials.secret_key == "test"

    def test_explicit_credentials_used(self, client_config: ClientConfig) -> None:
        credentials = client_config.session().get_credentials()
        assert credentials is not None
        assert credentials.access_key == "testing"

    def test_client_region_and_single_attempt(self, client_config: ClientConfig) -> None:
        client = client_config.client("dynamodb")
        assert client.meta.region_name == "us-east-1"
        assert client.meta.config.retries["total_max_attempts"] == 1
        assert client.meta.config.connect_timeout == 10.0
        assert client.meta.config.read_timeout == 30.0

    def test_localstack_s3_client_uses_path_style(self) -> None:
        client = ClientConfig(localstack=True).client("s3")
        assert client.meta.endpoint_url == LOCALSTACK_ENDPOINT
        assert client.meta.config.s3 == {"addressing_style": "path"}

    def test_repr_hides_secret(self, client_config: ClientConfig) -> None:
        text = repr(client_config)
        assert "testing" in text  # access key id is not secret
        assert "secret_access_key='***'" in text
