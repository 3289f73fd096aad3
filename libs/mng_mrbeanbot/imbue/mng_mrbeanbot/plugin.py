from collections.abc import Sequence

import click

from imbue.mng_mrbeanbot import hookimpl
from imbue.mng_mrbeanbot.cli import mrbeanbot
from imbue.mng_mrbeanbot.interfaces import LaunchIntegrationInterface
from imbue.mng_mrbeanbot.integration import MrBeanBotIntegration


# Module-level hook implementations for pluggy entry point discovery
@hookimpl
def register_launch_integration() -> tuple[str, type[LaunchIntegrationInterface]]:
    """Register the mrbeanbot launch integration."""
    return ("mrbeanbot", MrBeanBotIntegration)


@hookimpl
def register_cli_commands() -> Sequence[click.Command] | None:
    """Register the mrbeanbot command group with mng."""
    return [mrbeanbot]
