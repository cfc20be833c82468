import sys

from agri_vision._cli import main

sys.exit(main())
