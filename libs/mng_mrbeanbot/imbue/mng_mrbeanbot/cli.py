import click
from click_option_group import optgroup
from loguru import logger

from imbue.mng_mrbeanbot.data_types import DEFAULT_OLLAMA_BASE_URL
from imbue.mng_mrbeanbot.discovery import discover_ollama_model_ids
from imbue.mng_mrbeanbot.integration import MrBeanBotIntegration
from imbue.mng_mrbeanbot.logging import setup_logging
from imbue.mng_mrbeanbot.primitives import LogLevel


@click.group()
@click.option(
    "--log-level",
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    default=LogLevel.INFO.value,
    show_default=True,
    help="Verbosity of log messages written to stderr",
)
def mrbeanbot(log_level: str) -> None:
    """Launch MrBeanBot against the local Ollama server and manage its Ollama models."""
    setup_logging(LogLevel(log_level.upper()))


@mrbeanbot.command()
@click.argument("model", default="", required=False)
def launch(model: str) -> None:
    """Run the MrBeanBot gateway in the foreground with Ollama enabled.

    MrBeanBot serves the models listed in its own config; use 'configure' to change them.
    """
    MrBeanBotIntegration().launch(model)


@mrbeanbot.command()
def paths() -> None:
    """Print the config files managed for MrBeanBot, one per line."""
    for config_path in MrBeanBotIntegration().get_config_paths():
        click.echo(str(config_path))


@mrbeanbot.command()
def models() -> None:
    """Print the Ollama model ids currently configured in MrBeanBot, one per line."""
    for model_id in MrBeanBotIntegration().list_provider_models():
        click.echo(model_id)


@mrbeanbot.command()
@click.argument("model_ids", nargs=-1, metavar="[MODEL_ID]...")
@optgroup.group("Model Selection")
@optgroup.option(
    "--discover",
    is_flag=True,
    default=False,
    help="Also add every model the Ollama server has pulled (listed after any MODEL_ID arguments)",
)
@optgroup.group("Ollama")
@optgroup.option(
    "--base-url",
    default=DEFAULT_OLLAMA_BASE_URL,
    show_default=True,
    help="Root URL of the Ollama server, used for discovery and written to the config",
)
@optgroup.group("Agent Defaults")
@optgroup.option(
    "--set-default",
    is_flag=True,
    default=False,
    help="Make the first model MrBeanBot's primary model",
)
def configure(model_ids: tuple[str, ...], discover: bool, base_url: str, set_default: bool) -> None:
    """Write an Ollama provider section with the given models into MrBeanBot's config.

    The ollama provider section is replaced as a whole; everything else in the
    config file is kept.
    """
    selected_model_ids = list(model_ids)
    if discover:
        selected_model_ids.extend(discover_ollama_model_ids(base_url))
    elif len(selected_model_ids) == 0:
        raise click.UsageError("Pass at least one MODEL_ID, or use --discover")

    if len(selected_model_ids) == 0:
        logger.warning("No models to configure; MrBeanBot config left unchanged")
        return

    integration = MrBeanBotIntegration(ollama_base_url=base_url)
    integration.merge_provider_models(selected_model_ids, is_default_model_set=set_default)
