import logging
import os
from functools import partial

from flask import Flask, jsonify

from fridgechef_backend.api import init_app as init_api
from fridgechef_backend.config import (
    DEFAULT_LLM_BASE_URL,
    DEFAULT_LLM_MAX_TOKENS,
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_TIMEOUT_SECONDS,
    MAX_REQUEST_SIZE,
)
from fridgechef_backend.services.analysis import (
    AnalysisConfig,
    create_default_dependencies,
)


def create_app() -> Flask:
    """Application factory for the FridgeChef backend."""
    app = Flask(__name__)
    # Recipes are returned in contract field order.
    app.json.sort_keys = False
    app.config["MAX_CONTENT_LENGTH"] = MAX_REQUEST_SIZE

    _configure_logging(app)

    shared_api_key = os.environ.get("FRIDGECHEF_LLM_API_KEY") or os.environ.get(
        "ANTHROPIC_API_KEY"
    )
    if not shared_api_key:
        app.logger.warning(
            "FRIDGECHEF_LLM_API_KEY/ANTHROPIC_API_KEY not set; "
            "requests must supply a personal API key"
        )

    analysis_config = AnalysisConfig(
        shared_api_key=shared_api_key,
        model=os.environ.get("FRIDGECHEF_LLM_MODEL", DEFAULT_LLM_MODEL),
        base_url=os.environ.get("FRIDGECHEF_LLM_BASE_URL", DEFAULT_LLM_BASE_URL),
        max_tokens=_env_number(
            app, "FRIDGECHEF_LLM_MAX_TOKENS", DEFAULT_LLM_MAX_TOKENS, int
        ),
        timeout_seconds=_env_number(
            app, "FRIDGECHEF_LLM_TIMEOUT_SECONDS", DEFAULT_LLM_TIMEOUT_SECONDS, float
        ),
    )
    app.extensions["analysis_dependencies_factory"] = partial(
        create_default_dependencies, config=analysis_config
    )

    @app.get("/healthz")
    def healthcheck():
        return jsonify(
            status="ok",
            apiKeyMode="shared" if shared_api_key else "personal-only",
        )

    @app.get("/api/healthz")
    def api_healthcheck():
        return healthcheck()

    init_api(app)

    return app


def _configure_logging(app: Flask) -> None:
    """Ensure application and root loggers emit INFO-level logs."""

    logging.basicConfig(level=logging.INFO)
    logging.getLogger().setLevel(logging.INFO)
    app.logger.setLevel(logging.INFO)


def _env_number(app: Flask, name: str, default, cast):
    """Read a numeric env var, keeping ``default`` when it is unset or invalid."""

    raw_value = os.environ.get(name)
    if raw_value is None:
        return default
    try:
        value = cast(raw_value)
    except ValueError:
        app.logger.warning("ignoring invalid %s=%s", name, raw_value)
        return default
    if value <= 0:
        app.logger.warning("ignoring non-positive %s=%s", name, raw_value)
        return default
    return value


app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8000)
