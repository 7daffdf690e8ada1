#!/usr/bin/env python
from setuptools import setup
setup(
    name='remoteclasses',
    version='1.0.0',
    description='strongly-typed subclasses for remote data service objects',
    author='Six Apart Ltd.',
    author_email='python@sixapart.com',

    packages=['remoteclasses'],
    python_requires='>=3.7',
    install_requires=['simplejson>=3.3.0', 'httplib2>=0.9'],
    extras_require={
        'test': ['mock', 'pytest'],
    },
)
