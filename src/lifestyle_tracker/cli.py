"""CLI entry point for lifestyle-tracker."""

import click

from .commands import favorites, init, serve, session, types, week


@click.group()
@click.version_option(version="0.1.0", prog_name="lifestyle-tracker")
def main():
    """lifestyle-tracker: weekly workout checkboxes backed by a session log.

    Example usage:

        # Initialize the database
        lifestyle-tracker init

        # Check Yoga on Monday, then log a real workout
        lifestyle-tracker week toggle mon Yoga
        lifestyle-tracker session complete --name "Leg day" -t Resistance

        # Review this week and the four before it
        lifestyle-tracker week history
    """
    pass


# Register commands
main.add_command(init)
main.add_command(week)
main.add_command(session)
main.add_command(types)
main.add_command(favorites)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
