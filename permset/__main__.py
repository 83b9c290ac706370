"""Run the permset CLI with `python -m permset`"""

from .cli.main import main_entry

if __name__ == "__main__":
    main_entry()
