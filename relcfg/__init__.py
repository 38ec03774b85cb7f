"""Release configuration helper: build, detect, render and validate semantic-release setups."""

__version__ = "0.3.0"
