from __future__ import annotations

from functools import lru_cache

from flask import Blueprint, current_app, jsonify

from lottobridge.config import load_config
from lottobridge.query import QueryService
from lottobridge.service import build_query_service

from ..schemas import LatestResultResponse

bp = Blueprint("results", __name__)

QUERY_SERVICE_KEY = "lottobridge.query_service"


@lru_cache(maxsize=1)
def get_query_service() -> QueryService:
    return build_query_service(load_config())


@bp.get("/latest")
def latest_results():
    try:
        service = current_app.extensions.get(QUERY_SERVICE_KEY) or get_query_service()
        result = service.latest()
    except Exception as exc:
        current_app.logger.exception("Unable to produce latest results: %s", exc)
        return jsonify({"error": "upstream failed", "detail": str(exc)}), 502

    response = LatestResultResponse(**result.to_dict())
    return jsonify(response.model_dump())
