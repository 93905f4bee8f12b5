"""Allow ``python -m paper_importer``."""

import sys

from .cli import main

sys.exit(main())
