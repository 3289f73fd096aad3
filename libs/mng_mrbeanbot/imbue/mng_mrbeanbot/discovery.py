from typing import Any
from typing import Final

import httpx
from loguru import logger

from imbue.mng_mrbeanbot.errors import OllamaDiscoveryError
from imbue.mng_mrbeanbot.logging import log_span

DEFAULT_DISCOVERY_TIMEOUT_SECONDS: Final[float] = 5.0


def _parse_tags_payload(payload: Any) -> list[str]:
    if not isinstance(payload, dict):
        raise ValueError("response body is not a JSON object")
    models = payload.get("models")
    if models is None:
        return []
    if not isinstance(models, list):
        raise ValueError("'models' is not a list")

    model_ids: list[str] = []
    for model in models:
        if not isinstance(model, dict) or not isinstance(model.get("name"), str):
            raise ValueError(f"unexpected model entry: {model!r}")
        model_ids.append(model["name"])
    return model_ids


def discover_ollama_model_ids(
    base_url: str,
    timeout_seconds: float = DEFAULT_DISCOVERY_TIMEOUT_SECONDS,
    transport: httpx.BaseTransport | None = None,
) -> list[str]:
    """Ask a running Ollama server which models it has pulled, via GET /api/tags.

    Returns model names in the order the server lists them. An empty list means
    the server is up but has no models.
    """
    tags_url = base_url.rstrip("/") + "/api/tags"
    with log_span("Listing Ollama models from {}", tags_url):
        try:
            with httpx.Client(timeout=timeout_seconds, transport=transport) as client:
                response = client.get(tags_url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise OllamaDiscoveryError(base_url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise OllamaDiscoveryError(base_url, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise OllamaDiscoveryError(base_url, f"invalid JSON response: {e}") from e

        try:
            model_ids = _parse_tags_payload(payload)
        except ValueError as e:
            raise OllamaDiscoveryError(base_url, str(e)) from e

    if len(model_ids) == 0:
        logger.warning("Ollama at {} is reachable but has no models; pull one with 'ollama pull <model>'", base_url)
    return model_ids
