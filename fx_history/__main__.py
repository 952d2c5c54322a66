"""Allow ``python -m fx_history``."""

from __future__ import annotations

from fx_history.cli import main

if __name__ == "__main__":  # pragma: no cover - thin wrapper
    raise SystemExit(main())
