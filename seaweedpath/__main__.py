# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys

from seaweedpath.cli import main

if __name__ == "__main__":
    sys.exit(main())
