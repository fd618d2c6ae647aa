"""Tests for configuration helpers."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from velocity import config


class TestPlaceholders:
    @pytest.mark.parametrize("value", [None, "", "   ", "your_anthropic_key", "dummy_key", "changeme"])
    def test_placeholders(self, value):
        assert config.is_placeholder(value) is True

    def test_real_value(self):
        assert config.is_placeholder("sk-ant-123") is False


class TestOptionalSecret:
    def test_env_value_wins(self):
        with patch.dict("os.environ", {"MEDIA_API_KEY": "real-key"}):
            assert config._optional_secret("MEDIA_API_KEY") == "real-key"

    def test_placeholder_off_aws_is_none(self):
        with patch.dict("os.environ", {"MEDIA_API_KEY": "your_media_key"}), \
             patch.object(config, "_ON_AWS", False):
            assert config._optional_secret("MEDIA_API_KEY") is None

    def test_ssm_used_on_aws(self):
        with patch.dict("os.environ", {"MEDIA_API_KEY": ""}), \
             patch.object(config, "_ON_AWS", True), \
             patch.object(config, "_get_ssm_parameter", return_value="from-ssm") as mock_ssm:
            assert config._optional_secret("MEDIA_API_KEY") == "from-ssm"
        mock_ssm.assert_called_once_with("MEDIA_API_KEY")


class TestLoadedSettings:
    def test_placeholder_key_means_offline(self):
        assert config.ANTHROPIC_API_KEY is None

    def test_iteration_cap_default(self):
        assert config.MAX_TOOL_ITERATIONS >= 1
