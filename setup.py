#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
from setuptools import setup

here = os.path.abspath(os.path.dirname(__file__))

for line in open(os.path.join(here, 'niri_launcher', '__init__.py')).readlines():
    if line.startswith('__version__'):
        __version__ = line.split('=', 1)[1].strip().strip('"\'')
        break
else:
    __version__ = '0.0.0'

PROGRAM_VERSION = __version__

setup(
    name="niri-launcher",
    version=PROGRAM_VERSION,
    description="Application and window launcher backend for the niri compositor",
    license='BSD',
    package_dir={'': '.'},
    packages=['niri_launcher'],
    install_requires=['setuptools', 'PyGObject'],
    extras_require={
        'test': ['pytest'],
    },
    scripts=['niri-launcher'],
    python_requires='>=3.11',
)
