import sys

from phivolcs_api.cli import main

sys.exit(main())
