"""
Main entry point for cmdnest

This allows running the dispatcher with: python -m cmdnest
"""
from .cli import main

if __name__ == "__main__":
    main()
