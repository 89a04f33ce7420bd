import sys

from chip8core.cli import main

sys.exit(main())
