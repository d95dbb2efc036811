"""Allow running as ``python -m icadmin``."""

from .main import main

main()
