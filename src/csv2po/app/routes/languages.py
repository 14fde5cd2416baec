"""Expose the standard language list to administrative front-ends."""

from __future__ import annotations

from flask import Blueprint, jsonify

from csv2po.config.languages import load_standard_languages

blueprint = Blueprint("languages", __name__, url_prefix="/api/v1/languages")


@blueprint.get("/")
def list_languages():
    """Return the standard language identifiers and their English names."""

    languages = [
        {"code": code, "name": name} for code, name in load_standard_languages().items()
    ]
    return jsonify({"languages": languages}), 200
