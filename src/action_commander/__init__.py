"""Action Commander - pin and upgrade CI workflow action versions."""

__version__ = "0.1.0"
