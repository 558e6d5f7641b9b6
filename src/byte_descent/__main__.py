import sys

from byte_descent.cli import main

sys.exit(main())
