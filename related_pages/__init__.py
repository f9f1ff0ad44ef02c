"""Rank notes in a vault by how closely their metadata and location match a reference note."""

__version__ = "0.1.0"
