import sys

from ignore_filter.cli.filter import main

sys.exit(main())
