"""Allow ``python -m docker_reaper``."""

import sys

from docker_reaper.cli import main

sys.exit(main())
