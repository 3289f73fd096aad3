import pluggy

from imbue.mng_mrbeanbot import hookspecs
from imbue.mng_mrbeanbot import plugin
from imbue.mng_mrbeanbot.errors import DuplicateIntegrationError
from imbue.mng_mrbeanbot.errors import IntegrationNotFoundError
from imbue.mng_mrbeanbot.interfaces import LaunchIntegrationInterface
from imbue.mng_mrbeanbot.primitives import IntegrationName

# =============================================================================
# Launch Integration Registry
# =============================================================================

_integration_class_registry: dict[IntegrationName, type[LaunchIntegrationInterface]] = {}
# Use a mutable container to track state without 'global' keyword
_registry_state: dict[str, bool] = {"integrations_loaded": False}


def reset_integration_registry() -> None:
    """Reset the integration registry to its initial state.

    This is primarily used for test isolation to ensure a clean state between tests.
    """
    _integration_class_registry.clear()
    _registry_state["integrations_loaded"] = False


def create_plugin_manager() -> pluggy.PluginManager:
    """Create a plugin manager with the launch hookspecs and every installed "mng" plugin."""
    pm = pluggy.PluginManager("mng")
    pm.add_hookspecs(hookspecs)
    pm.load_setuptools_entrypoints("mng")
    # Not installed as a distribution (e.g. running from a source checkout)
    if not pm.is_registered(plugin):
        pm.register(plugin, name="mrbeanbot")
    return pm


def load_integrations_from_plugins(pm: pluggy.PluginManager) -> None:
    """Load launch integrations from plugins via the register_launch_integration hook."""
    if _registry_state["integrations_loaded"]:
        return

    # Each implementation returns a single tuple
    all_registrations = pm.hook.register_launch_integration()

    for registration in all_registrations:
        if registration is not None:
            integration_name, integration_class = registration
            register_integration(integration_name, integration_class)

    _registry_state["integrations_loaded"] = True


def register_integration(name: str, integration_class: type[LaunchIntegrationInterface]) -> None:
    """Register an integration class under name. Registering a different class twice is an error."""
    key = IntegrationName(name)
    existing_class = _integration_class_registry.get(key)
    if existing_class is not None and existing_class is not integration_class:
        raise DuplicateIntegrationError(key)
    _integration_class_registry[key] = integration_class


def get_integration_class(name: str) -> type[LaunchIntegrationInterface]:
    key = IntegrationName(name)
    if key not in _integration_class_registry:
        raise IntegrationNotFoundError(key)
    return _integration_class_registry[key]


def get_integration(name: str) -> LaunchIntegrationInterface:
    """Instantiate the integration registered under name with its default settings."""
    return get_integration_class(name)()


def list_registered_integrations() -> list[str]:
    return sorted(str(k) for k in _integration_class_registry.keys())
