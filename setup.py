# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
import io, os.path, re
from setuptools import setup, find_packages


def readfile(*parts):
    """Return contents of file with path relative to script directory"""
    herepath = os.path.abspath(os.path.dirname(__file__))
    fullpath = os.path.join(herepath, *parts)
    with io.open(fullpath, 'r') as f:
        return f.read()


def extract_varvals(*varnames):
    """Extract value of __version__ variable by parsing python script"""
    initfile = readfile('src', 'dlr2d', '__init__.py')
    for varname in varnames:
        var_re = re.compile(rf"(?m)^{varname}\s*=\s*['\"]([^'\"]*)['\"]")
        match = var_re.search(initfile)
        yield match.group(1)


REPO_URL = "https://github.com/dlr2d/dlr2d"
VERSION, = extract_varvals('__version__')
LONG_DESCRIPTION = readfile('README.rst')

setup(
    name='dlr2d',
    version=VERSION,

    description=
        'two-dimensional discrete Lehmann representation in Matsubara '
        'frequency',
    long_description=LONG_DESCRIPTION,
    long_description_content_type='text/x-rst',
    keywords=' '.join([
        'dlr',
        'sparse-ir',
        'vertex',
        ]),
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Physics',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        ],

    url=REPO_URL,
    author='The dlr2d authors',

    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'scipy',
        'sparse-ir>=1.0',
        'h5py',
        'setuptools'
    ],
    extras_require={
        'test': ['pytest'],
        'doc': ['sphinx>=2.1', 'sphinx_rtd_theme'],
        'xprec': ['xprec>=1.0'],
        },

    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    )
