"""Main entry point for running splurge-property-model as a module.

This allows users to run the CLI with:
    python -m splurge_property_model [command] [options]
"""

from .cli import main

if __name__ == "__main__":
    main()
