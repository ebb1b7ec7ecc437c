"""Allow ``python -m shadowlight``."""

from shadowlight.main import main

raise SystemExit(main())
