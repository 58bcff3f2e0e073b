from setuptools import setup

import os

HERE				= os.path.dirname( os.path.abspath( __file__ ))

__version__			= None
__version_info__		= None
exec( open( os.path.join( HERE, 'slmpbatch', 'version.py' ), 'r' ).read() )

console_scripts			= [
    'slmp_bench		= slmpbatch.bin.slmp_bench:main',
]

entry_points			= {
    'console_scripts': 		console_scripts,
}


def requirements( name ):
    return list(
        # Remove whitespace, elide blank lines and comments
        ''.join( r.split() )
        for r in open( os.path.join( HERE, name )).readlines()
        if r.strip() and not r.strip().startswith( '#' )
    )


install_requires		= requirements( "requirements.txt" )
tests_require			= requirements( "requirements-tests.txt" )

# Since setuptools is retiring tests_require, add it as an option
extras_require			= {
    'tests':			tests_require,
}

packages			= [
    "slmpbatch",
    "slmpbatch.remote",
    "slmpbatch.bin",
]

long_description		= """\
Slmpbatch reads and writes the registers of Mitsubishi MELSEC (and other
SLMP-capable) PLCs, using batched SLMP (MC protocol 3E frame) requests over
TCP/IP or UDP/IP.  Register addresses (D, X, Y, M, B and SD) are validated
before use, and every read/write on a client is serialized.

The included slmp_bench benchmark compares the cost of sequential
single-register access against contiguous and scattered batched access, and
verifies that every access pattern reads back identical register values.
"""

classifiers			= [
    "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
    "License :: Other/Proprietary License",
    "Programming Language :: Python :: 3",
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Environment :: Console",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: System :: Benchmark",
]

setup(
    name			= "slmpbatch",
    version			= __version__,
    install_requires		= install_requires,
    extras_require		= extras_require,
    packages			= packages,
    zip_safe			= False,
    entry_points		= entry_points,
    author			= "Perry Kundert",
    author_email		= "perry@hardconsulting.com",
    description			= "SLMP PLC batched register access client, benchmark and verifier",
    long_description		= long_description,
    license			= "Dual License; GPLv3 and Proprietary",
    keywords			= "SLMP MC protocol MELSEC PLC register batch benchmark",
    classifiers			= classifiers,
)
