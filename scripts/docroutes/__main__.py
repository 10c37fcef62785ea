"""Allow running as: python -m scripts.docroutes"""

import sys

from scripts.docroutes.cli import main

sys.exit(main())
