"""Build orchestration and UI helpers for the QR Code SDK project."""

__version__ = "0.1.0"
