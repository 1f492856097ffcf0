"""Allow ``python -m helpai``."""

from .cli import main

raise SystemExit(main())
