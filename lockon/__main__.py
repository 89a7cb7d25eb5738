import sys

from lockon.main import main

sys.exit(main())
