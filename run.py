"""
Entry Point Script (Bootstrap)
==============================
Development runner located outside the 'src' package.

It puts 'src' on sys.path so 'from forcegraph...' resolves without
installing the package first.

Usage:
    $ python run.py
"""
import sys
import os

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

from forcegraph.main import main

if __name__ == "__main__":
    main()
