"""Hooks that mng plugins implement to contribute launch integrations.

register_cli_commands has the same name and signature as the mng host's hook, so
the plugin module can be registered with the host or with a standalone plugin
manager built by registry.create_plugin_manager.
"""

from collections.abc import Sequence

import click
import pluggy

from imbue.mng_mrbeanbot.interfaces import LaunchIntegrationInterface

hookspec = pluggy.HookspecMarker("mng")


@hookspec
def register_launch_integration() -> tuple[str, type[LaunchIntegrationInterface]] | None:
    """Register a third-party agent that can be launched against the local Ollama server.

    Return a tuple of (integration_name, integration_class), or None if not
    registering an integration. The class must be constructible without
    arguments.
    """


@hookspec
def register_cli_commands() -> Sequence[click.Command] | None:
    """Register additional CLI commands with mng.

    Return a sequence of click commands (or groups), or None.
    """
