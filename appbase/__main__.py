import sys

from appbase.cli.main import main

sys.exit(main())
