"""Development runner: starts the API with the environment-selected database.
With NODE_ENV unset this serves ./data/dev.db seeded with the fixture users.
"""
import sys

from userapi.server import main

if __name__ == '__main__':
    sys.exit(main())
