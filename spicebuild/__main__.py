import sys

from spicebuild.cli import main

sys.exit(main())
