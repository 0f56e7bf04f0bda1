"""Allow ``python -m cni_format``."""

import sys

from cni_format.cli import main

sys.exit(main())
