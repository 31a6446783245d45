"""Main entry point for cwt CLI."""

import os
import sys

from rich.console import Console

from cwt.config import Config
from cwt.core import RefreshEngine, Repository
from cwt.exceptions import RepositoryNotFoundError
from cwt.logging_config import get_logger, setup_logging
from cwt.state import Model

from .args import parse_args

console = Console()
logger = get_logger(__name__)


def osc7_sequence(path: str) -> str:
    """Terminal escape that reports the working directory to the emulator."""
    return f"\x1b]7;file://localhost{path}\x1b\\"


def hand_off_to_shell(path: str, shell: str) -> None:
    """Replace this process with an interactive shell inside path.

    Does not return on success.
    """
    os.chdir(path)
    sys.stdout.write(osc7_sequence(path))
    sys.stdout.flush()
    logger.info(f"Handing off to {shell} in {path}")
    os.execvp(shell, [shell])


def main(argv=None):
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        setup_logging(
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
            log_file=parsed_args.log_file,
        )

        config_values = {
            "workers": parsed_args.workers,
            "nested": not parsed_args.no_nested,
            "exec_shell": not parsed_args.no_shell,
            "verbose": parsed_args.verbose,
            "debug": parsed_args.debug,
            "log_file": parsed_args.log_file,
        }
        if parsed_args.command:
            config_values["command"] = parsed_args.command
        config = Config(**config_values)

        repositories = Repository.discover_all(
            os.getcwd(), nested=config.nested, max_depth=config.nested_depth
        )
        if not repositories:
            raise RepositoryNotFoundError(os.getcwd())

        logger.info(f"Managing {len(repositories)} repositories from {os.getcwd()}")

        from cwt.tui import CwtApp

        model = Model(repositories)
        engine = RefreshEngine(workers=config.workers)
        app = CwtApp(model, engine, config=config)
        try:
            app.run(mouse=False)
        finally:
            engine.close()

        target = model.resume_to
        if target is not None and config.exec_shell and target.exists():
            hand_off_to_shell(target.path, config.shell_path)

        return 0
    except RepositoryNotFoundError as e:
        logger.debug(str(e))
        console.print("[red]Error: Not in a git repository[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
