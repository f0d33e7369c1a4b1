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

"""
Platform configuration (files) mgmt.

"""
import platform
import sys
import os
import shutil
from typing import (
    Annotated,
    Callable,
    MutableMapping,
)
from pathlib import Path

import msgspec
import tomlkit
try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

from .log import get_logger
from .types import Struct

log = get_logger('config')


def get_app_dir(
    app_name: str,
    roaming: bool = True,
    force_posix: bool = False,

) -> str:
    r"""Returns the config folder for the application.  The default behavior
    is to return whatever is most appropriate for the operating system.

    For an app called ``"ntpeek"``, something like the following
    folders could be returned:

    Mac OS X:
      ``~/Library/Application Support/ntpeek``
    Unix:
      ``~/.config/ntpeek``
    Unix (POSIX):
      ``~/.ntpeek``
    Win 7 (roaming):
      ``C:\Users\<user>\AppData\Roaming\ntpeek``

    :param app_name: the application name.
    :param roaming: controls if the folder should be roaming or not on Windows.
                    Has no affect otherwise.
    :param force_posix: if this is set to `True` then on any POSIX system the
                        folder will be stored in the home folder with a leading
                        dot instead of the XDG config home or darwin's
                        application support folder.
    """

    def _posixify(name):
        return "-".join(name.split()).lower()

    if platform.system() == 'Windows':
        key = "APPDATA" if roaming else "LOCALAPPDATA"
        folder = os.environ.get(key)
        if folder is None:
            folder = os.path.expanduser("~")
        return os.path.join(folder, app_name)
    if force_posix:
        return os.path.join(
            os.path.expanduser("~/.{}".format(_posixify(app_name))))
    if sys.platform == "darwin":
        return os.path.join(
            os.path.expanduser("~/Library/Application Support"), app_name
        )
    return os.path.join(
        os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")),
        _posixify(app_name),
    )


_config_dir: Path = Path(get_app_dir('ntpeek'))

_conf_names: set[str] = {
    'conf',  # god config
}


class ConfigurationError(Exception):
    'Misconfigured settings, likely in a TOML file.'


def _override_config_dir(
    path: str | Path,
) -> None:
    global _config_dir
    _config_dir = Path(path)


def _conf_fn_w_ext(
    name: str,
) -> str:
    # change this if we ever change the config file format.
    return f'{name}.toml'


def get_conf_dir() -> Path:
    '''
    Return the user configuration directory ``Path``
    on the local filesystem.

    '''
    return _config_dir


def get_conf_path(
    conf_name: str = 'conf',

) -> Path:
    '''
    Return the top-level default config path normally under
    ``~/.config/ntpeek`` on linux for a given ``conf_name``.

    '''
    assert str(conf_name) in _conf_names
    fn = _conf_fn_w_ext(conf_name)
    return _config_dir / Path(fn)


def repodir() -> Path:
    '''
    Return the abspath as ``Path`` to the git repo's root dir.

    '''
    return Path(__file__).absolute().parent.parent


def load(
    # NOTE: always appended with .toml suffix
    conf_name: str = 'conf',
    path: Path | None = None,

    decode: Callable[
        [str | bytes,],
        MutableMapping,
    ] = tomllib.loads,

    touch_if_dne: bool = False,

    **tomlkws,

) -> tuple[dict, Path]:
    '''
    Load config file by name.

    If desired config is not in the top level user config path then
    pass the ``path: Path`` explicitly.

    '''
    # create the $HOME/.config/ntpeek dir if dne
    if not _config_dir.is_dir():
        _config_dir.mkdir(
            parents=True,
            exist_ok=True,
        )

    path_provided: bool = path is not None
    path: Path = path or get_conf_path(conf_name)

    if not path.is_file():
        if not touch_if_dne:
            log.debug(f'No config file @ {path}, using defaults')
            return {}, path

        # only do a template if no path provided,
        # just touch an empty file with same name.
        if path_provided:
            with path.open(mode='x'):
                pass

        # try to copy in a template config to the user's dir if one
        # exists otherwise just touch an empty file.
        else:
            fn: str = _conf_fn_w_ext(conf_name)
            template: Path = repodir() / 'config' / fn
            if template.is_file():
                shutil.copyfile(template, path)
            else:
                path.touch()

        assert path.is_file(), f'Config file {path} not created!?'

    with path.open(mode='r') as fp:
        config: dict = decode(
            fp.read(),
            **tomlkws,
        )

    log.debug(f"Read config file {path}")
    return config, path


def write(
    config: dict,  # toml config as dict

    name: str | None = None,
    path: Path | None = None,
    fail_empty: bool = True,

    **toml_kwargs,

) -> None:
    ''''
    Write config to disk.

    Create a ``conf.toml`` file if one does not exist.

    '''
    if name:
        path: Path = path or get_conf_path(name)
        dirname: Path = path.parent
        if not dirname.is_dir():
            log.debug(f"Creating config dir {_config_dir}")
            dirname.mkdir(parents=True)

    if (
        not config
        and fail_empty
    ):
        raise ValueError(
            "Watch out you're trying to write a blank config!"
        )

    log.debug(
        f"Writing config `{name}` file to:\n"
        f"{path}"
    )
    with path.open(mode='w') as fp:
        return tomlkit.dump(  # preserve style on write B)
            config,
            fp,
            **toml_kwargs,
        )


class FeedConfig(Struct, forbid_unknown_fields=True):
    # prefix subscribed for per-topic value updates
    namespace: str = '/'

    # prefix subscribed (topics-only) for namespace discovery
    discovery_namespace: str = '/'


# zero sized mem chans or grids are unusable
PositiveInt = Annotated[int, msgspec.Meta(ge=1)]


class UIConfig(Struct, forbid_unknown_fields=True):
    # seconds between hand-off channel drains
    tick_period: Annotated[float, msgspec.Meta(gt=0)] = 0.05

    # capacity of the bridge -> ui mem chan, events are dropped
    # when full.
    channel_size: PositiveInt = 1024

    grid_columns: PositiveInt = 4
    grid_rows: PositiveInt = 4


class DashConfig(Struct):
    feed: FeedConfig = msgspec.field(default_factory=FeedConfig)
    ui: UIConfig = msgspec.field(default_factory=UIConfig)


def load_dash_config(
    path: Path | None = None,

) -> DashConfig:
    '''
    Load and typecast the ``[feed]`` and ``[ui]`` tables from
    ``conf.toml`` with defaults for anything unset.

    '''
    conf, path = load('conf', path=path)
    try:
        return msgspec.convert(
            {
                'feed': conf.get('feed', {}),
                'ui': conf.get('ui', {}),
            },
            type=DashConfig,
        )
    except msgspec.ValidationError as err:
        raise ConfigurationError(
            f'Invalid settings in {path}:\n{err}'
        ) from err
