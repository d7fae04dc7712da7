from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from .errors import SimulationError
from .generator import generate_processes
from .simulation import DEFAULT_QUANTUM, AlgorithmSelection, simulate
from .workload_io import processes_from_records

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
MAX_GENERATED = 1000


def _error(kind: str, message: str, status: int = 400):
    return jsonify(error=kind, message=message), status


def create_app() -> Flask:
    app = Flask(__name__)

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    # --- Random workload for demos ---
    @app.route("/api/processes/<int:count>", methods=["GET", "OPTIONS"])
    def processes(count: int):
        if request.method == "OPTIONS":
            return "", 204
        if count <= 0 or count > MAX_GENERATED:
            return _error("InvalidCount", f"count must be between 1 and {MAX_GENERATED}")
        return jsonify([p.to_dict() for p in generate_processes(count)])

    # --- Run the selected algorithms on one workload ---
    @app.route("/api/schedule", methods=["POST", "OPTIONS"])
    def schedule():
        if request.method == "OPTIONS":
            return "", 204

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("InvalidJSON", "request body must be a JSON object")

        try:
            processes = processes_from_records(data.get("processes") or [])
        except ValueError as exc:
            logger.warning("rejected schedule request: %s", exc)
            return _error("InvalidProcess", str(exc))

        flags = data.get("algorithms") or {}
        if not isinstance(flags, dict):
            return _error("InvalidJSON", "'algorithms' must be an object of boolean flags")
        try:
            selection = AlgorithmSelection.from_flags(flags)
        except TypeError as exc:
            return _error("InvalidJSON", str(exc))

        # Passed through as sent; validation rejects non-integer quanta.
        quantum = data.get("timeQuantum", DEFAULT_QUANTUM)

        try:
            results = simulate(processes, selection, quantum=quantum)
        except SimulationError as exc:
            logger.warning("rejected schedule request: %s", exc)
            return _error(exc.kind, str(exc))

        return jsonify([r.to_dict() for r in results])

    return app


def serve(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, debug: bool = False) -> None:
    app = create_app()
    logger.info("serving on http://%s:%d", host, port)
    app.run(host=host, port=port, debug=debug)
