"""
Pipeline stages.

Each stage module exposes a per-item step returning a StepResult and an
`*_all` driver that raises on the first failure. krakenwrap.pipeline.run
wires them together; do NOT import stage modules here.
"""
__all__ = [
    "dispatch",
    "subsample",
    "classify",
    "translate",
    "visualize",
    "run",
]
