"""Allow ``python -m junie_shim``."""

from junie_shim.main import main

if __name__ == "__main__":
    main()
