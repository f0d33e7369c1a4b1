#!/usr/bin/env python

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

from setuptools import setup, find_packages

with open('README.rst', encoding='utf-8') as f:
    readme = f.read()


setup(
    name="ntpeek",
    version='0.1.0.alpha0.dev0',
    description='live pub-sub topic browsing for hackers.',
    long_description=readme,
    license='AGPLv3',
    platforms=['linux'],
    packages=find_packages(exclude=['tests', 'tests.*']),
    entry_points={
        'console_scripts': [
            'ntpeek = ntpeek.cli:cli',
        ]
    },
    install_requires=[
        'tomli',  # fastest pure py reader (pre 3.11)
        'tomlkit',  # style preserving writer
        'click',
        'colorlog',
        'pygments',
        'msgspec',  # performant msging and structs

        # async
        'trio >= 0.23, < 0.24',  # ``trio.TaskStatus``; tractor needs ``trio.MultiError``
        'tractor',

        # search
        'fuzzywuzzy[speedup]',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    tests_require=['pytest'],
    python_requires=">=3.10",
    keywords=[
        "async",
        "pubsub",
        "telemetry",
        "dashboard",
        "fuzzy search",
    ],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Operating System :: POSIX :: Linux',
        "Programming Language :: Python :: Implementation :: CPython",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        'Intended Audience :: Science/Research',
        'Intended Audience :: Developers',
    ],
)
