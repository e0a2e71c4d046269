"""Allow ``python -m resim_harness``."""

from .main import main

main()
