"""
Main entry point for running tagfill as a module.
Allows: python -m tagfill ...
"""
from .cli import main

if __name__ == "__main__":
    main()
