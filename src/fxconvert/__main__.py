import sys

from fxconvert.main import main

sys.exit(main())
