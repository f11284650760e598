"""Allow running pomotimer as a module: python -m pomotimer."""

from .cli import main


if __name__ == "__main__":
    main()
