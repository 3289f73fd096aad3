from pathlib import Path

from click import ClickException


class BaseMrBeanBotError(Exception):
    """Base exception for all mng_mrbeanbot errors."""


class MrBeanBotError(ClickException, BaseMrBeanBotError):
    """Base exception for all user-facing mng_mrbeanbot errors.

    Subclasses can provide a user_help_text attribute with additional context
    to help the user resolve the error. The CLI appends it to the message.
    """

    user_help_text: str | None = None

    def format_message(self) -> str:
        if self.user_help_text:
            return str(self) + "  [" + self.user_help_text + "]"
        return str(self)


class HomeDirectoryUnavailableError(MrBeanBotError):
    """Raised when the MrBeanBot config path cannot be resolved."""

    user_help_text = "Set HOME, or point MRBEANBOT_CONFIG_PATH at the config file."

    def __init__(self) -> None:
        super().__init__("Could not determine home directory")


class ConfigError(MrBeanBotError):
    """Base class for errors reading or writing the MrBeanBot config document."""

    def __init__(self, action: str, path: Path, reason: str) -> None:
        self.action = action
        self.path = path
        self.reason = reason
        super().__init__(f"Failed {action} {path}: {reason}")


class ConfigDirectoryCreateError(ConfigError):
    """The directory holding the config file could not be created."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__("creating config dir", path, reason)


class ConfigReadError(ConfigError):
    """The config file exists but could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__("reading config", path, reason)


class ConfigParseError(ConfigError):
    """The config file is not valid JSON, or its root is not an object."""

    user_help_text = "Fix or remove the file; it is never overwritten while it cannot be parsed."

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__("parsing config", path, reason)


class ConfigShapeError(ConfigError):
    """A key on a path this plugin manages holds a value of the wrong JSON type."""

    user_help_text = "Fix the value by hand; it is never replaced automatically."

    def __init__(self, path: Path, key_path: str, expected: str) -> None:
        self.key_path = key_path
        self.expected = expected
        super().__init__("using config", path, f"'{key_path}' must be {expected}")


class ConfigWriteError(ConfigError):
    """The merged config document could not be written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__("writing config", path, reason)


class ProcessLaunchError(MrBeanBotError):
    """The agent process could not be started, or exited with a non-zero status."""

    def __init__(self, command: str, reason: str, returncode: int | None = None) -> None:
        self.command = command
        self.reason = reason
        self.returncode = returncode
        super().__init__(f"Failed to run {command}: {reason}")
        # Let the CLI exit with the agent's own status
        if returncode is not None and returncode > 0:
            self.exit_code = returncode


class OllamaDiscoveryError(MrBeanBotError):
    """The Ollama server could not be queried for its local models."""

    user_help_text = "Start Ollama with 'ollama serve', or pass --base-url."

    def __init__(self, base_url: str, reason: str) -> None:
        self.base_url = base_url
        self.reason = reason
        super().__init__(f"Could not list models from Ollama at {base_url}: {reason}")


class IntegrationNotFoundError(MrBeanBotError):
    """No launch integration with this name is registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Launch integration not found: {name}")


class DuplicateIntegrationError(BaseMrBeanBotError, ValueError):
    """Two plugins registered a launch integration under the same name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Launch integration registered more than once: {name}")


class JsonPathTypeError(BaseMrBeanBotError, TypeError):
    """A value along a nested key path is not a JSON object."""

    def __init__(self, key_path: str) -> None:
        self.key_path = key_path
        super().__init__(f"Expected a JSON object at '{key_path}'")
