"""Entry point for running qatunnel as a module: python -m qatunnel"""

from .cli import main

if __name__ == "__main__":
    main()
