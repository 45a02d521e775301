#!/usr/bin/env python
import setuptools


def dict_of(cls):
    """Decorator that converts a class into a dict of its public members."""
    return {k: v for k, v in cls.__dict__.items() if not k.startswith('_')}


@dict_of
class setup_params:
    name = 'comboloader'
    version = '0.1'

    description = ('AMD module aggregator core: feature-conditional '
                   'dependency expansion and cache keys')

    license = 'MIT'

    classifiers = [
        'Private :: Do Not Upload',

        'Development Status :: 3 - Alpha',

        'Intended Audience :: Developers',
        'Topic :: Software Development :: Build Tools',

        'License :: OSI Approved :: MIT License',

        'Programming Language :: Python :: 3',
    ]
    keywords = 'amd aggregator combo loader has dependencies cache'

    packages = setuptools.find_packages(include=['comboloader',
                                                 'comboloader.*'])

    install_requires = [
        'ply>=3.4',
        'PyYAML',
    ]

    @dict_of
    class extras_require:
        test = [
            'pytest',
        ]

        dev = test + [
            'pytest-cov',
        ]

    tests_require = extras_require['test']


if __name__ == '__main__':
    # Guarded to make the module importable by tools like pytest.
    setuptools.setup(**setup_params)
