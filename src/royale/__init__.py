"""GitHub Wars: a battle royale that lives in a JSON file and a README."""

__version__ = "0.1.0"
