import sys

from mdrender.cli import main

sys.exit(main())
