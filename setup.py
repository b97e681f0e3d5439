#!/usr/bin/env python
import os
from setuptools import setup, find_packages


path = os.path.join(os.path.dirname(__file__), 'src/runorder/version.py')
with open(path, 'r') as f:
    exec(f.read())


setup(
    name='runorder',
    version=__version__,
    description='Decides the order in which discovered test classes should run',
    python_requires='>=3.11',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    install_requires=[
        'attrs>=22.2',
        'cement>=3.0',
        'loguru>=0.6',
        'pyyaml>=6.0',
        'typing_extensions>=4.0',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'runorder = runorder.cli:main',
        ]
    },
)
