from setuptools import setup, find_packages

import tex2texi

version = tex2texi.__version__

setup(
    name='tex2texi',
    version=version,
    description='Translate LaTeX-like standard draft sources into Texinfo',
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages('.', exclude=('tests',)),
    install_requires=[],
    entry_points={
        'console_scripts': [
            'tex2texi=tex2texi.cli:main',
        ]
    },
    classifiers=[
        'Programming Language :: Python :: 3',

        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',

        'License :: OSI Approved :: MIT License',

        'Operating System :: OS Independent',

        'Topic :: Software Development :: Documentation',
        'Topic :: Text Processing :: Markup :: LaTeX',
        'Topic :: Utilities',
    ],
    python_requires='>=3.7',
)
