import sys

from deploy_wait.main import main

sys.exit(main())
