"""Punto de entrada: python -m stability_tracker."""

from __future__ import annotations

from stability_tracker.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
