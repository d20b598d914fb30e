"""Module entry point for python -m fleet_rental."""

from __future__ import annotations

from fleet_rental.app import main


if __name__ == "__main__":
    raise SystemExit(main())
