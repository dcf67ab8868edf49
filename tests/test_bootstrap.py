"""Tests for startup wiring."""

import pytest

import repo_steward.bootstrap as bootstrap
from repo_steward.bootstrap import bootstrap_runtime
from repo_steward.inference.client import InferenceClient
from repo_steward.settings import StewardSettings


@pytest.fixture
def logging_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(bootstrap, "configure_logging", lambda **kwargs: calls.append(kwargs))
    return calls


class TestBootstrapRuntime:
    """bootstrap_runtime()"""

    def test_debug_setting_reaches_logging(self, logging_calls):
        runtime = bootstrap_runtime(StewardSettings(debug=True), json_logs=False)

        assert logging_calls == [{"debug": True, "json": False}]
        assert runtime.settings.debug is True

    def test_reads_environment_when_no_settings(self, monkeypatch, logging_calls):
        monkeypatch.setenv("STEWARD_DEBUG", "true")
        monkeypatch.setenv("STEWARD_MODEL_ID", "env-model")

        settings, model = bootstrap_runtime()

        assert logging_calls == [{"debug": True, "json": True}]
        assert settings.model_id == "env-model"
        assert isinstance(model, InferenceClient)
        assert model.model_id == "env-model"

    def test_default_is_info_level_json(self, monkeypatch, logging_calls):
        monkeypatch.delenv("STEWARD_DEBUG", raising=False)
        bootstrap_runtime(StewardSettings())
        assert logging_calls == [{"debug": False, "json": True}]
