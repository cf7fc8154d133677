"""Allow ``python -m leak_gate``."""

from leak_gate.cli import main

if __name__ == "__main__":
    main()
