import sys

from brainfuck.cli import main

sys.exit(main())
