"""Structured logging setup and per-request context for the advisory API."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from soilsense.config import LogFormat, get_settings

_configured = False

# Libraries that log every statement or connection at DEBUG.
_NOISY_LOGGERS = ("aiosqlite", "httpcore", "httpx")


def _add_service(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
	event_dict.setdefault("service", "soilsense")
	return event_dict


def configure_structured_logging() -> None:
	"""Configure stdlib logging and structlog once per process."""
	global _configured
	if _configured:
		return

	settings = get_settings()
	log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

	processors: list[Any] = [
		structlog.contextvars.merge_contextvars,
		structlog.processors.add_log_level,
		structlog.processors.TimeStamper(fmt="iso", utc=True),
		_add_service,
		structlog.processors.format_exc_info,
	]
	if settings.log_format == LogFormat.json:
		processors.append(structlog.processors.JSONRenderer())
		logging.basicConfig(level=log_level, format="%(message)s")
	else:
		processors.append(structlog.dev.ConsoleRenderer())
		logging.basicConfig(level=log_level)

	for name in _NOISY_LOGGERS:
		logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

	structlog.configure(
		processors=processors,
		wrapper_class=structlog.make_filtering_bound_logger(log_level),
		logger_factory=structlog.PrintLoggerFactory(),
		cache_logger_on_first_use=True,
	)
	_configured = True


def _route_template(request: Request) -> str:
	"""``/api/v1/soil/measurements/{measurement_id}`` rather than the concrete id."""
	for route in request.app.router.routes:
		match, _ = route.matches(request.scope)
		if match == Match.FULL:
			return getattr(route, "path", request.url.path)
	return request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Bind request and device context, then log one line per request."""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
		request.state.request_id = request_id

		structlog.contextvars.clear_contextvars()
		structlog.contextvars.bind_contextvars(
			request_id=request_id,
			device_id=request.headers.get("x-device-id"),
			language=request.query_params.get("language"),
		)

		logger = structlog.get_logger("soilsense.request")
		route = _route_template(request)
		start = time.perf_counter()

		try:
			response = await call_next(request)
		except Exception as exc:
			logger.exception(
				"http_request_failed",
				method=request.method,
				route=route,
				duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
				error=str(exc),
			)
			raise

		response.headers["x-request-id"] = request_id
		if response.status_code >= 500:
			log = logger.error
		elif response.status_code >= 400:
			log = logger.warning
		else:
			log = logger.info
		log(
			"http_request",
			method=request.method,
			route=route,
			status_code=response.status_code,
			duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
		)
		return response
