"""Build tasks. Each module exposes plain functions taking explicit paths."""
