"""Main entry point for the terminal Gantt planner."""
import dataclasses
import locale
import logging
from pathlib import Path

import click

from cli import CLI
from config import load_settings
from generator import GenerationAdapter, GenerationController
from layout import ZoomState
from storage import SAMPLE_TASKS, open_storage
from store import TaskStore

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def configure_locale() -> None:
    """Use the user's locale for month names in the chart header."""
    try:
        locale.setlocale(locale.LC_TIME, '')
    except locale.Error as exc:
        logger.debug('Keeping the C locale for dates: %s', exc)


@click.command()
@click.option('--data-file', type=click.Path(dir_okay=False, path_type=Path),
              help='Task file (default: data/tasks.json or GANTT_DATA_FILE).')
@click.option('--fit/--no-fit', default=None, help='Start in fit-to-width mode.')
@click.option('--pixels-per-day', type=click.IntRange(min=20), default=None,
              help='Initial day width in fixed zoom.')
@click.option('--demo', is_flag=True, help='Start with sample tasks when there are none.')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None)
def main(data_file, fit, pixels_per_day, demo, log_level):
    settings = load_settings()
    overrides = {
        'data_file': data_file,
        'fit': fit,
        'pixels_per_day': pixels_per_day,
        'log_level': log_level.upper() if log_level else None,
    }
    settings = dataclasses.replace(settings, **{k: v for k, v in overrides.items() if v is not None})
    configure_logging(settings.log_level)

    configure_locale()
    storage, records, warning = open_storage(settings)
    if warning:
        click.echo(f'Warning: {warning}', err=True)
    if demo and not records:
        records = SAMPLE_TASKS
    store = TaskStore(records)

    zoom = ZoomState(pixels_per_day=settings.pixels_per_day, fit=settings.fit)
    controller = GenerationController(GenerationAdapter.from_settings(settings), store)
    CLI(store, storage, zoom, controller, alt_screen=settings.alt_screen).run()


if __name__ == "__main__":
    main()
