"""Run with: python -m forcegraph"""
from forcegraph.main import main

if __name__ == "__main__":
    main()
