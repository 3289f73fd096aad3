import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any
from typing import Generator

import pluggy
import pytest
from click.testing import CliRunner
from loguru import logger

from imbue.mng_mrbeanbot.config_paths import CONFIG_PATH_ENV_VAR
from imbue.mng_mrbeanbot.config_paths import STATE_DIR_ENV_VAR
from imbue.mng_mrbeanbot.config_paths import fixed_config_path
from imbue.mng_mrbeanbot.integration import MrBeanBotIntegration
from imbue.mng_mrbeanbot.primitives import CommandString
from imbue.mng_mrbeanbot.registry import create_plugin_manager
from imbue.mng_mrbeanbot.registry import reset_integration_registry

_FAKE_MRBEANBOT_SCRIPT = """#!/bin/sh
printf '%s\\n' "$OLLAMA_API_KEY" > "$FAKE_MRBEANBOT_OUTPUT_DIR/ollama_api_key"
printf '%s\\n' "$@" > "$FAKE_MRBEANBOT_OUTPUT_DIR/args"
exit "${FAKE_MRBEANBOT_EXIT_CODE:-0}"
"""


@pytest.fixture(autouse=True)
def setup_test_mrbeanbot_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point HOME at a temp directory and drop any config location overrides from the real environment."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv(CONFIG_PATH_ENV_VAR, raising=False)
    monkeypatch.delenv(STATE_DIR_ENV_VAR, raising=False)
    monkeypatch.delenv("OLLAMA_API_KEY", raising=False)
    reset_integration_registry()

    yield

    reset_integration_registry()
    # CLI invocations replace the default handler with one bound to CliRunner's stream
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """A config location whose parent directory does not exist yet."""
    return tmp_path / "state" / ".mrbeanbot" / "mrbeanbot.json"


@pytest.fixture
def integration(config_path: Path) -> MrBeanBotIntegration:
    return MrBeanBotIntegration(config_path_provider=fixed_config_path(config_path))


@pytest.fixture
def write_config(config_path: Path) -> Callable[[Any], Path]:
    """Write a JSON document (or raw text, if given a str) to the test config path."""

    def _write(content: Any) -> Path:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else json.dumps(content)
        config_path.write_text(text)
        return config_path

    return _write


@pytest.fixture
def read_config(config_path: Path) -> Callable[[], Any]:
    return lambda: json.loads(config_path.read_text())


@pytest.fixture
def fake_mrbeanbot_output_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    output_dir = tmp_path / "fake_mrbeanbot_output"
    output_dir.mkdir()
    monkeypatch.setenv("FAKE_MRBEANBOT_OUTPUT_DIR", str(output_dir))
    return output_dir


@pytest.fixture
def fake_mrbeanbot_bin_dir(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    fake_mrbeanbot_output_dir: Path,
) -> Path:
    """Put an executable named MrBeanBot on PATH that records its args and OLLAMA_API_KEY."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script_path = bin_dir / "MrBeanBot"
    script_path.write_text(_FAKE_MRBEANBOT_SCRIPT)
    script_path.chmod(0o755)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return bin_dir


@pytest.fixture
def fake_mrbeanbot_integration(fake_mrbeanbot_bin_dir: Path, config_path: Path) -> MrBeanBotIntegration:
    return MrBeanBotIntegration(
        command=CommandString("MrBeanBot"),
        config_path_provider=fixed_config_path(config_path),
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing CLI commands."""
    return CliRunner()


@pytest.fixture
def plugin_manager() -> pluggy.PluginManager:
    return create_plugin_manager()


@pytest.fixture
def captured_log_messages() -> Generator[list[str], None, None]:
    """Collect the text of every loguru message at INFO or above emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="INFO")
    yield messages
    logger.remove(handler_id)
