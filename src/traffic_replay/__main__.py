import sys

from traffic_replay.cli import main

sys.exit(main())
