import sys

from survcompare.report import main

sys.exit(main())
