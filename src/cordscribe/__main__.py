import sys

from cordscribe.main import main

sys.exit(main())
