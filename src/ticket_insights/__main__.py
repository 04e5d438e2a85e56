"""Entry point for running ticket insights as a module."""

from . import main

if __name__ == "__main__":
    main()
