import sys

from cipher312.cli import main

sys.exit(main())
