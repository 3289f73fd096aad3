import os
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from loguru import logger
from pydantic import Field

from imbue.mng_mrbeanbot.config_file import ensure_config_dir
from imbue.mng_mrbeanbot.config_file import list_provider_model_ids
from imbue.mng_mrbeanbot.config_file import make_model_ref
from imbue.mng_mrbeanbot.config_file import read_config_document
from imbue.mng_mrbeanbot.config_file import replace_provider_section
from imbue.mng_mrbeanbot.config_file import set_primary_model
from imbue.mng_mrbeanbot.config_file import write_config_document
from imbue.mng_mrbeanbot.config_paths import ConfigPathProvider
from imbue.mng_mrbeanbot.config_paths import resolve_config_path
from imbue.mng_mrbeanbot.data_types import DEFAULT_OLLAMA_BASE_URL
from imbue.mng_mrbeanbot.data_types import OLLAMA_LOCAL_API_KEY
from imbue.mng_mrbeanbot.data_types import OLLAMA_PROVIDER_NAME
from imbue.mng_mrbeanbot.data_types import build_ollama_provider_section
from imbue.mng_mrbeanbot.errors import HomeDirectoryUnavailableError
from imbue.mng_mrbeanbot.errors import ProcessLaunchError
from imbue.mng_mrbeanbot.interfaces import LaunchIntegrationInterface
from imbue.mng_mrbeanbot.logging import log_span
from imbue.mng_mrbeanbot.primitives import CommandString

MRBEANBOT_DISPLAY_NAME: Final[str] = "MrBeanBot"
GATEWAY_ARGS: Final[tuple[str, ...]] = ("gateway", "run", "--force")
OLLAMA_API_KEY_ENV_VAR: Final[str] = "OLLAMA_API_KEY"


class MrBeanBotIntegration(LaunchIntegrationInterface):
    """Launches the MrBeanBot gateway and manages its Ollama provider config.

    Where the config lives is decided by config_path_provider, which defaults
    to the agent's own lookup rules (see config_paths.resolve_config_path).
    """

    command: CommandString = Field(
        default=CommandString("MrBeanBot"),
        description="Command used to start MrBeanBot",
    )
    ollama_base_url: str = Field(
        default=DEFAULT_OLLAMA_BASE_URL,
        description="Ollama server root; the OpenAI-compatible /v1 suffix is added when writing the config",
    )
    config_path_provider: ConfigPathProvider = Field(
        default=resolve_config_path,
        exclude=True,
        repr=False,
        description="Returns the config file location, or None when it cannot be determined",
    )

    def get_display_name(self) -> str:
        return MRBEANBOT_DISPLAY_NAME

    def get_config_paths(self) -> list[Path]:
        config_path = self.config_path_provider()
        if config_path is None:
            return []
        return [config_path]

    def build_launch_command(self) -> list[str]:
        return [str(self.command), *GATEWAY_ARGS]

    def build_launch_env(self) -> dict[str, str]:
        """The caller's environment plus the key that turns on MrBeanBot's built-in Ollama provider."""
        return {**os.environ, OLLAMA_API_KEY_ENV_VAR: OLLAMA_LOCAL_API_KEY}

    def launch(self, model: str) -> None:
        # The gateway picks models from its own config, so model is not forwarded.
        command = self.build_launch_command()
        with log_span("Launching MrBeanBot gateway for model {}", model):
            try:
                result = subprocess.run(command, env=self.build_launch_env())
            except OSError as e:
                raise ProcessLaunchError(str(self.command), str(e)) from e

        if result.returncode < 0:
            raise ProcessLaunchError(
                str(self.command),
                f"terminated by signal {-result.returncode}",
                returncode=result.returncode,
            )
        if result.returncode != 0:
            raise ProcessLaunchError(
                str(self.command),
                f"exited with status {result.returncode}",
                returncode=result.returncode,
            )

    def _require_config_path(self) -> Path:
        config_path = self.config_path_provider()
        if config_path is None:
            raise HomeDirectoryUnavailableError()
        return config_path

    def list_provider_models(self) -> list[str]:
        config_path = self._require_config_path()
        document = read_config_document(config_path)
        if document is None:
            return []
        return list_provider_model_ids(document, OLLAMA_PROVIDER_NAME, config_path)

    def merge_provider_models(self, model_ids: Sequence[str], is_default_model_set: bool = False) -> Path:
        """Replace the ollama provider section of the config with one entry per model id.

        Every other key in the document is kept. When is_default_model_set is
        true, the first model also becomes the agent's primary model.
        """
        config_path = self._require_config_path()
        ensure_config_dir(config_path)

        document = read_config_document(config_path)
        if document is None:
            document = {}

        provider_section = build_ollama_provider_section(model_ids, self.ollama_base_url)
        document = replace_provider_section(
            document,
            OLLAMA_PROVIDER_NAME,
            provider_section.to_json_object(),
            config_path,
        )

        primary_model_ref = make_model_ref(OLLAMA_PROVIDER_NAME, model_ids) if is_default_model_set else None
        if primary_model_ref is not None:
            document = set_primary_model(document, primary_model_ref, config_path)

        write_config_document(config_path, document)

        logger.info("MrBeanBot config updated: {}", config_path)
        logger.info("Configured {} Ollama model(s)", len(model_ids))
        if primary_model_ref is not None:
            logger.info("Default model set to: {}", primary_model_ref)
        return config_path
