"""Allow running as `python -m git_batch_utils`."""

import sys

from .cli import main

sys.exit(main())
