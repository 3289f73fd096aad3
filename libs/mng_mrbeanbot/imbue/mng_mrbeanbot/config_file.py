import json
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from loguru import logger

from imbue.mng_mrbeanbot.errors import ConfigDirectoryCreateError
from imbue.mng_mrbeanbot.errors import ConfigParseError
from imbue.mng_mrbeanbot.errors import ConfigReadError
from imbue.mng_mrbeanbot.errors import ConfigShapeError
from imbue.mng_mrbeanbot.errors import ConfigWriteError
from imbue.mng_mrbeanbot.errors import JsonPathTypeError
from imbue.mng_mrbeanbot.file_utils import atomic_write_bytes
from imbue.mng_mrbeanbot.json_tree import JsonObject
from imbue.mng_mrbeanbot.json_tree import format_key_path
from imbue.mng_mrbeanbot.json_tree import get_nested_object
from imbue.mng_mrbeanbot.json_tree import set_nested_value
from imbue.mng_mrbeanbot.logging import log_span

CONFIG_DIR_MODE: Final[int] = 0o755
CONFIG_FILE_MODE: Final[int] = 0o644

_PROVIDERS_KEY_PATH: Final[tuple[str, ...]] = ("models", "providers")
_PRIMARY_MODEL_KEY_PATH: Final[tuple[str, ...]] = ("agents", "defaults", "model", "primary")


def provider_key_path(provider_name: str) -> tuple[str, ...]:
    return _PROVIDERS_KEY_PATH + (provider_name,)


def read_config_document(path: Path) -> JsonObject | None:
    """Load the config document at path, or return None if there is no file there.

    Any other read failure, invalid JSON, or a root that is not an object is
    an error; the file is never treated as empty in those cases.
    """
    with log_span("Reading MrBeanBot config from {}", path):
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No MrBeanBot config at {}", path)
            return None
        except UnicodeDecodeError as e:
            raise ConfigParseError(path, f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise ConfigReadError(path, str(e)) from e

        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigParseError(path, str(e)) from e

    if not isinstance(document, dict):
        raise ConfigParseError(path, f"top-level value must be an object, got {type(document).__name__}")
    return document


def ensure_config_dir(path: Path) -> None:
    """Create the directory that holds the config file at path, if it is missing."""
    try:
        path.parent.mkdir(mode=CONFIG_DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigDirectoryCreateError(path.parent, str(e)) from e


def write_config_document(path: Path, document: JsonObject) -> None:
    """Atomically write document to path as 2-space indented JSON. The parent directory must already exist.

    The content is encoded before the target is touched, so a document that
    cannot be written leaves the existing file unchanged.
    """
    try:
        data = (json.dumps(document, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
    except UnicodeEncodeError as e:
        raise ConfigWriteError(path, f"config is not encodable as UTF-8: {e}") from e
    with log_span("Writing MrBeanBot config to {}", path):
        try:
            atomic_write_bytes(path, data, new_file_mode=CONFIG_FILE_MODE)
        except OSError as e:
            raise ConfigWriteError(path, str(e)) from e


def list_provider_model_ids(document: JsonObject, provider_name: str, path: Path) -> list[str]:
    """Return the non-empty model ids configured for provider_name, in file order."""
    key_path = provider_key_path(provider_name)
    try:
        provider = get_nested_object(document, key_path)
    except JsonPathTypeError as e:
        raise ConfigShapeError(path, e.key_path, "an object") from e
    if provider is None:
        return []

    models_key_path = format_key_path(key_path + ("models",))
    models = provider.get("models")
    if models is None:
        return []
    if not isinstance(models, list):
        raise ConfigShapeError(path, models_key_path, "a list")

    model_ids: list[str] = []
    for index, model in enumerate(models):
        if not isinstance(model, dict):
            raise ConfigShapeError(path, f"{models_key_path}[{index}]", "an object")
        model_id = model.get("id")
        if model_id is None or model_id == "":
            continue
        if not isinstance(model_id, str):
            raise ConfigShapeError(path, f"{models_key_path}[{index}].id", "a string")
        model_ids.append(model_id)
    return model_ids


def replace_provider_section(
    document: JsonObject,
    provider_name: str,
    provider_section: JsonObject,
    path: Path,
) -> JsonObject:
    """Return a copy of document with models.providers.<provider_name> replaced.

    An existing value at that key must be an object; anything else (for
    example a string left by a hand edit) is reported rather than overwritten.
    """
    key_path = provider_key_path(provider_name)
    try:
        get_nested_object(document, key_path)
        return set_nested_value(document, key_path, provider_section)
    except JsonPathTypeError as e:
        raise ConfigShapeError(path, e.key_path, "an object") from e


def set_primary_model(document: JsonObject, model_ref: str, path: Path) -> JsonObject:
    """Return a copy of document with agents.defaults.model.primary set to model_ref."""
    try:
        return set_nested_value(document, _PRIMARY_MODEL_KEY_PATH, model_ref)
    except JsonPathTypeError as e:
        raise ConfigShapeError(path, e.key_path, "an object") from e


def make_model_ref(provider_name: str, model_ids: Sequence[str]) -> str | None:
    """The "<provider>/<model>" reference for the first model, or None if there are none."""
    if len(model_ids) == 0:
        return None
    return f"{provider_name}/{model_ids[0]}"
