import sys

from j5_relay.cli import main

sys.exit(main())
