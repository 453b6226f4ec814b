"""Allow ``python -m metagen``."""

from metagen.generate import main

raise SystemExit(main())
