"""Main entry point for the weekly planner."""
from cli import cli


def main():
    cli(prog_name="planner")

if __name__ == "__main__":
    main()
