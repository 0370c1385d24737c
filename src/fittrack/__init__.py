"""fittrack - energy-balance calculations for meal, exercise and weight logs."""

__version__ = "0.1.0"
