"""Allow running as: python -m safeguard_mapper"""

import sys

from safeguard_mapper.main import main

if __name__ == "__main__":
    sys.exit(main())
