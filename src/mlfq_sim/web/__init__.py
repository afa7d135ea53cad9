"""Browser-facing HTTP API for the MLFQ simulator.

This package provides a Flask application that runs simulations on
request.  It is an **optional** extra — install with::

    pip install mlfq-sim[web]

The ``create_app`` factory in ``app.py`` serves two endpoints:

- ``GET /api/defaults`` — the built-in workload and configuration.
- ``POST /api/simulate`` — run a workload and return its events and metrics.
"""
