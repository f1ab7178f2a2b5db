"""
Entry point for running Divina as a module.

Usage: python -m divina [command] [options]
"""

from divina.cli.parser import main

if __name__ == "__main__":
    main()
