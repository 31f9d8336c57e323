import sys

from ringqueue.cli import main

sys.exit(main())
