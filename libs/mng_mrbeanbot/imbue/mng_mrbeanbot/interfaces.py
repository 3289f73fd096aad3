from abc import ABC
from abc import abstractmethod
from collections.abc import Sequence
from pathlib import Path

from imbue.mng_mrbeanbot.data_types import FrozenModel


class LaunchIntegrationInterface(FrozenModel, ABC):
    """A third-party agent that mng can launch against the local Ollama server.

    Implementations own one or more config files of the agent and know how to
    point the agent at Ollama: either through the environment at launch time,
    or by editing those files ahead of time.
    """

    @abstractmethod
    def get_display_name(self) -> str:
        """Human-readable name shown by the host."""

    @abstractmethod
    def get_config_paths(self) -> list[Path]:
        """Config files this integration reads and writes.

        Empty when their location cannot be determined; this means there is
        nothing to manage, not that something failed.
        """

    @abstractmethod
    def launch(self, model: str) -> None:
        """Run the agent in the foreground, attached to the caller's terminal.

        Returns once the agent exits successfully. Raises ProcessLaunchError if it
        cannot be started or exits with a non-zero status.
        """

    @abstractmethod
    def list_provider_models(self) -> list[str]:
        """Model ids already configured for Ollama in the agent's config."""

    @abstractmethod
    def merge_provider_models(self, model_ids: Sequence[str], is_default_model_set: bool = False) -> Path:
        """Write the Ollama provider section for model_ids into the agent's config.

        Returns the path that was written.
        """
