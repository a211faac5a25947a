"""Endpoint that turns a fridge photo into a recipe suggestion."""

from __future__ import annotations

import time

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge

from fridgechef_backend.api.deps import get_dependencies_factory
from fridgechef_backend.config.uploads import FILE_TOO_LARGE_MESSAGE
from fridgechef_backend.services.analysis import AnalysisInput, analyze_with_factory
from fridgechef_backend.services.errors import ValidationError, classify_analysis_error
from fridgechef_backend.services.settings import extract_locale
from fridgechef_backend.services.uploads import read_uploaded_images

bp = Blueprint("analyze", __name__, url_prefix="/api")


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _failure(message: str, status: int, started: float):
    return (
        jsonify(success=False, error=message, processingTime=_elapsed_ms(started)),
        status,
    )


def _build_input() -> AnalysisInput:
    return AnalysisInput(
        files=tuple(read_uploaded_images(request.files.getlist("image"))),
        preferences=request.form.get("preferences") or None,
        dietary_restrictions=request.form.get("dietaryRestrictions") or None,
        locale=extract_locale(request.form.get("locale")),
        user_settings=request.form.get("userSettings") or None,
        api_key=request.form.get("apiKey") or None,
    )


@bp.post("/analyze-fridge")
def analyze_fridge():
    """Analyze an uploaded fridge photo and return one recipe."""

    started = time.perf_counter()

    try:
        dependencies_factory = get_dependencies_factory()
    except RuntimeError as exc:
        return jsonify(success=False, error=str(exc)), 503

    analysis_input = _build_input()
    personal_key = analysis_input.api_key is not None

    try:
        result = analyze_with_factory(analysis_input, dependencies_factory)
    except ValidationError as exc:
        return _failure(str(exc), 400, started)
    except Exception as exc:
        classified = classify_analysis_error(exc, personal_key=personal_key)
        if classified.status >= 500:
            current_app.logger.exception(
                "fridge analysis failed", extra={"status": classified.status}
            )
        else:
            current_app.logger.warning(
                "fridge analysis rejected: %s",
                type(exc).__name__,
                extra={"status": classified.status, "personal_key": personal_key},
            )
        return _failure(classified.message, classified.status, started)

    return jsonify(
        success=True,
        recipe=result.recipe.to_dict(),
        processingTime=result.processing_time_ms,
    )


@bp.errorhandler(RequestEntityTooLarge)
def request_too_large(_exc):
    return jsonify(success=False, error=FILE_TOO_LARGE_MESSAGE), 413


@bp.route("/analyze-fridge", methods=["GET", "PUT", "PATCH", "DELETE"])
def analyze_fridge_method_not_allowed():
    return jsonify(success=False, error="Method not allowed"), 405
