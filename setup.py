#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
from setuptools import find_packages, setup

scriptPath = os.path.abspath( os.path.dirname( __file__ ) )
with open( os.path.join( scriptPath, 'README.md' ), encoding = 'utf-8' ) as file:
    readmeContents = file.read()

setup(
    name             = 'gamefscore',
    version          = '0.3.0',

    description      = 'Game file registry with transparent mounting of .obb and .rar containers',
    license          = 'MIT',
    classifiers      = [ 'License :: OSI Approved :: MIT License',
                         'Development Status :: 4 - Beta',
                         'Natural Language :: English',
                         'Operating System :: MacOS',
                         'Operating System :: Unix',
                         'Programming Language :: Python :: 3',
                         'Programming Language :: Python :: 3.10',
                         'Programming Language :: Python :: 3.11',
                         'Programming Language :: Python :: 3.12',
                         'Topic :: Games/Entertainment',
                         'Topic :: System :: Archiving' ],

    long_description = readmeContents,
    long_description_content_type = 'text/markdown',

    packages         = find_packages( include = [ 'gamefscore', 'gamefscore.*' ] ),
    python_requires  = '>=3.10',
    install_requires = [
        'rarfile>=4.0',
    ],
    extras_require   = {
        'full' : [ 'argcomplete' ],
        'rar'  : [],
        'test' : [ 'pytest' ],
    },
    entry_points = { 'console_scripts': [ 'gamefs=gamefscore.cli:cli' ] }
)
