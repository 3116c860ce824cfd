"""Allow ``python -m embedsmith``."""

from embedsmith.ui.cli import main


if __name__ == "__main__":
    main()
