import sys

from steamwatch.cli import main

sys.exit(main())
