"""Allow ``python -m suitemarks``."""

from suitemarks.main import main

main()
