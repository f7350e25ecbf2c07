"""Allow ``python -m clipmulti``."""

from clipmulti.cli.main import run

if __name__ == "__main__":
    run()
