"""Entry point for ``python -m file_explorer``."""

from file_explorer.app.cli import cli


def main() -> None:
    cli(prog_name="file-explorer")


if __name__ == "__main__":
    main()
