"""Allow ``python -m product_reels``."""

from .cli.app import main

if __name__ == "__main__":
    main()
