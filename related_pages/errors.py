from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when scoring options are malformed (bad multiplier, result cap or criteria shape)."""
