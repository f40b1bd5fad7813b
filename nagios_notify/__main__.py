import sys

from nagios_notify.main import main

sys.exit(main())
