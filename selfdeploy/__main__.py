import sys

from selfdeploy.cli import main

sys.exit(main())
