"""Flask application factory for the MLFQ simulator web API.

Every request builds its own ``Simulator``, so concurrent requests never
share queues, clocks or process records.

- ``GET /api/defaults`` — return the built-in workload as JSON.
- ``GET /api/presets`` — return every built-in configuration by name.
- ``POST /api/simulate`` — run a workload and return the event trace,
  the driver log, the metrics and the final clock value.

A simulation runs inside the request, so its size is capped: at most
``MAX_PROCESSES`` processes, arrivals no later than ``MAX_TIME`` and a
total burst of at most ``MAX_TIME``.
"""

from __future__ import annotations

from flask import Flask, Response, jsonify, request

from mlfq_sim.config import PRESETS, InvalidConfigurationError, MLFQConfig
from mlfq_sim.events import EventRecorder, event_to_dict
from mlfq_sim.logging import Logger
from mlfq_sim.process import InvalidProcessSpecError
from mlfq_sim.simulator import Simulator
from mlfq_sim.workload import Workload, workload_from_dict

MAX_PROCESSES = 64
MAX_TIME = 10_000
MAX_BODY_BYTES = 64 * 1024

_HTTP_BAD_REQUEST = 400


def limit_error(workload: Workload) -> str | None:
    """Return why *workload* is too large to simulate in a request, or None."""
    if len(workload.processes) > MAX_PROCESSES:
        return f"At most {MAX_PROCESSES} processes per request, got {len(workload.processes)}"
    for spec in workload.processes:
        if spec.arrival_time > MAX_TIME:
            return f"Process {spec.pid}: arrival time is limited to {MAX_TIME}"
    total = sum(spec.burst_time for spec in workload.processes)
    if total > MAX_TIME:
        return f"Total burst time is limited to {MAX_TIME}, got {total}"
    return None


def create_app() -> Flask:
    """Create and configure the Flask application.

    Returns:
        A configured Flask application ready to serve.

    """
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_BODY_BYTES

    @app.route("/api/defaults")
    def defaults() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the built-in workload and configuration."""
        return jsonify(Workload.default().to_dict())

    @app.route("/api/presets")
    def presets() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return each built-in configuration keyed by preset name."""
        return jsonify({name: MLFQConfig.preset(name).to_dict() for name in PRESETS})

    @app.route("/api/simulate", methods=["POST"])
    def simulate() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run the posted workload.

        Expects the workload JSON body described in ``mlfq_sim.workload``.

        Returns:
            JSON with ``events``, ``log``, ``metrics`` and ``final_time``
            fields.

        """
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({"error": "Missing JSON workload body"}), _HTTP_BAD_REQUEST

        try:
            workload = workload_from_dict(data)
        except (InvalidProcessSpecError, InvalidConfigurationError) as e:
            return jsonify({"error": str(e)}), _HTTP_BAD_REQUEST
        too_large = limit_error(workload)
        if too_large is not None:
            return jsonify({"error": too_large}), _HTTP_BAD_REQUEST

        recorder = EventRecorder()
        logger = Logger()
        result = Simulator.from_workload(workload, observers=[recorder], logger=logger).run()
        return jsonify(
            {
                "events": [event_to_dict(event) for event in recorder.events],
                "log": [entry.to_dict() for entry in logger.entries],
                "metrics": result.metrics.to_dict(),
                "final_time": result.final_time,
            }
        )

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``mlfq-sim-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
