import sys

from prominence.cli import main

sys.exit(main())
