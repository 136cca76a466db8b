"""eventsearch CLI entry point.

Delegates to ``eventsearch.cli`` which houses all Click commands.
Kept minimal so that ``python -m eventsearch`` and the ``eventsearch``
console-script entry point both resolve here.
"""

from __future__ import annotations

from eventsearch.cli import cli


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
