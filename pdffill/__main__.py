import sys

from pdffill.cli import main

sys.exit(main())
