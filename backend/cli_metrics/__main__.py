import sys

from cli_metrics.cli import main

sys.exit(main())
