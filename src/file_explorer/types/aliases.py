"""Type aliases using PEP 695 syntax."""

import os

# Anything the explorer accepts as a starting path
type PathInput = str | os.PathLike[str]
