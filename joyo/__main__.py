"""
Allow running as: python -m joyo
"""

from joyo.cli.joyo_cli import run

if __name__ == "__main__":
    run()
