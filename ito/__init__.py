"""Off-chain helpers for the HappyTokenPool ITO contracts."""

__version__ = "2.0.0"
