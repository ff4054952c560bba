"""Build tooling for the Spice Sass library."""

__version__ = "1.0.0"
