import logging
from pathlib import Path

import pytest
from ntpeek import config
from ntpeek.log import get_console_log


def pytest_addoption(parser):
    parser.addoption("--ll", action="store", dest='loglevel',
                     default=None, help="logging level to set when testing")


@pytest.fixture(scope='session')
def loglevel(request) -> str:
    return request.config.option.loglevel


@pytest.fixture()
def log(
    request: pytest.FixtureRequest,
    loglevel: str,
) -> logging.Logger:
    '''
    Deliver a per-test-named ``ntpeek.log`` instance.

    '''
    return get_console_log(
        level=loglevel,
        name=request.node.name,
    )


@pytest.fixture
def tmpconfdir(
    tmp_path: Path,
) -> Path:
    '''
    Point the config layer at a per-test temp dir so no user config
    is ever read or clobbered.

    '''
    tmpconfdir: Path = tmp_path / '_testing'
    tmpconfdir.mkdir()

    orig: Path = config.get_conf_dir()
    config._override_config_dir(tmpconfdir)
    yield tmpconfdir
    config._override_config_dir(orig)


@pytest.fixture
def topics() -> set[str]:
    return {
        '/robot/x',
        '/robot/y',
        '/robot/heading',
        '/arm/angle',
        '/arm/bend',
        '/drive/left/speed',
        '/drive/right/speed',
    }
