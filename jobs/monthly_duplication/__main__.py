import sys

from jobs.monthly_duplication.handler import main

sys.exit(main())
