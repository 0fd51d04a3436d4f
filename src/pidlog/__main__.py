"""Allow running pidlog with ``python -m pidlog``."""

from pidlog.cli import main

raise SystemExit(main())
