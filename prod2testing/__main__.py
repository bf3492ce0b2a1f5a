import sys

from prod2testing.main import main

sys.exit(main())
