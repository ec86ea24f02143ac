"""Command-line interface."""
from figcomposer.main import main

if __name__ == "__main__":
    main()
