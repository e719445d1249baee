import sys

from olsbench.cli import main

sys.exit(main())
