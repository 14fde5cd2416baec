"""Trigger spreadsheet synchronisations over HTTP."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from csv2po.app.http import problem_for_error
from csv2po.config.settings import load_settings_payload, resolve_settings
from csv2po.errors import ConfigurationError
from csv2po.services.orchestrator import LoggingObserver, SyncOrchestrator

blueprint = Blueprint("sync", __name__, url_prefix="/api/v1/sync")

logger = logging.getLogger(__name__)

# Filesystem locations and the download URL come from the server settings only.
REQUEST_OPTIONS = frozenset(
    {
        "extension_type",
        "extension_name",
        "replace_all",
        "allow_update",
        "plural_value_separator",
        "check_enabled_languages",
        "enabled_languages",
    }
)


def _parse_overrides() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        if request.get_data():
            raise BadRequest("Request body must be valid JSON")
        return {}
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")
    return dict(data)


def _restrict_overrides(overrides: Mapping[str, object]) -> dict:
    rejected = sorted(str(key) for key in overrides if key not in REQUEST_OPTIONS)
    if rejected:
        raise ConfigurationError(
            f"Option(s) {', '.join(rejected)} can only be set in the server settings file"
        )
    return dict(overrides)


@blueprint.post("/")
def trigger_sync():
    """Run a synchronisation using the server settings plus request overrides."""

    overrides = _parse_overrides()

    try:
        overrides = _restrict_overrides(overrides)
        base = load_settings_payload(current_app.config.get("CSV2PO_SETTINGS_PATH"))
        settings = resolve_settings(base, overrides)
    except ConfigurationError as error:
        return problem_for_error(error).to_response()

    orchestrator = SyncOrchestrator(observer=LoggingObserver(logger))
    report = orchestrator.run(settings)
    if report.fatal_error is not None:
        problem = problem_for_error(report.fatal_error, run_status=report.status.value)
        return problem.to_response()

    logger.info(
        "Sync finished: %d succeeded, %d failed", len(report.succeeded), len(report.failed)
    )
    return jsonify(report.as_dict()), 200
