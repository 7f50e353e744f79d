import sys

from colorplate.colorplate_extract import main

sys.exit(main())
