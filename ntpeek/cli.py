# ntpeek: live topic browsing for hackers
# Copyright (C) 2024-present  ntpeek contributors

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.

# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

'''
CLI commons.

'''
import json
import sys

import click

from .log import (
    get_console_log,
    get_logger,
    colorize_json,
)
from . import config
from .ui._search import rank


log = get_logger('cli')


@click.group()
@click.option(
    '--loglevel',
    '-l',
    default='warning',
    help='Logging level',
)
@click.option(
    '--configdir',
    default=None,
    help='Override the config dir',
)
@click.pass_context
def cli(
    ctx: click.Context,
    loglevel: str,
    configdir: str | None,
) -> None:
    '''
    Live pub-sub topic browsing.

    '''
    if configdir is not None:
        config._override_config_dir(configdir)

    ctx.ensure_object(dict)
    ctx.obj.update({
        'loglevel': loglevel,
        'log': get_console_log(loglevel),
    })


@cli.command()
@click.option(
    '--scores',
    '-s',
    is_flag=True,
    help='Prefix each topic with its match score',
)
@click.argument('pattern', required=True)
@click.argument('topics', nargs=-1)
def search(
    pattern: str,
    topics: tuple[str],
    scores: bool,
) -> None:
    '''
    Fuzzy rank TOPICS (or lines on stdin) against PATTERN.

    '''
    if not topics:
        topics = tuple(
            line.strip() for line in sys.stdin
            if line.strip()
        )

    matches = rank(pattern, topics)
    log.debug(f'{len(matches)}/{len(topics)} topics match {pattern!r}')

    for score, topic in matches:
        click.echo(f'{score}\t{topic}' if scores else topic)


@cli.command(name='config')
@click.option(
    '--color/--no-color',
    default=True,
    help='Syntax highlight the output',
)
def show_config(
    color: bool,
) -> None:
    '''
    Dump the effective config as json.

    '''
    try:
        conf = config.load_dash_config()
    except config.ConfigurationError as err:
        raise click.ClickException(str(err))

    data: dict = {
        'feed': conf.feed.to_dict(),
        'ui': conf.ui.to_dict(),
    }
    if color:
        click.echo(colorize_json(data))
    else:
        click.echo(json.dumps(data, sort_keys=True, indent=4))
