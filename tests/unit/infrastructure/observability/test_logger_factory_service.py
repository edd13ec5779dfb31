import pytest
import structlog

from task_manager_api.infrastructure.observability.logger_factory_service import select_renderer


@pytest.mark.parametrize("app_env", ["prod", "staging", "QA"])
def test_deployed_environments_render_json(app_env):
    assert isinstance(select_renderer(None, app_env), structlog.processors.JSONRenderer)


def test_local_environment_renders_console():
    assert isinstance(select_renderer(None, "local"), structlog.dev.ConsoleRenderer)


def test_explicit_format_overrides_environment():
    assert isinstance(select_renderer("console", "prod"), structlog.dev.ConsoleRenderer)
    assert isinstance(select_renderer("JSON", "local"), structlog.processors.JSONRenderer)


def test_unknown_format_falls_back_to_environment():
    assert isinstance(select_renderer("xml", "production"), structlog.processors.JSONRenderer)
