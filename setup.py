from setuptools import setup, find_packages
from codecs import open
from os import path


here = path.abspath(path.dirname(__file__))


with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

with open(path.join(here, 'strideio', '__init__.py')) as pkg:
    __version__ = eval(pkg.readline().split('=')[1])


setup(
    name='strideio',
    version=__version__,
    description='Running dynamics from FIT activity files',
    long_description=long_description,
    url='https://github.com/strideio/strideio',
    author='strideio contributors',
    license='MIT',
    keywords='running garmin stryd fit running-dynamics power',

    # See https://pypi.python.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Medical Science Apps.',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
    ],

    packages=find_packages(),
    python_requires='>=3.7',
    install_requires=[
        'numpy>=1.17',
        'pandas>=1.0',
        'pytz>=2011',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'strideio=strideio._util.cli:parse',
        ],
    },
)
