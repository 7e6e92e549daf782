import sys

from hsa_analyzer.cli import main

sys.exit(main())
