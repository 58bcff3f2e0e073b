
# 
# Slmpbatch -- SLMP Batched Register Access Client and Verifier
# 
# Copyright (c) 2013, Hard Consulting Corporation.
# 
# Slmpbatch is free software: you can redistribute it and/or modify it under the
# terms of the GNU General Public License as published by the Free Software
# Foundation, either version 3 of the License, or (at your option) any later
# version.  See the LICENSE file at the top of the source tree.
# 
# Slmpbatch is distributed in the hope that it will be useful, but WITHOUT ANY
# WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR
# A PARTICULAR PURPOSE.  See the GNU General Public License for more details.
# 

__author__                      = "Perry Kundert"
__email__                       = "perry@hardconsulting.com"
__copyright__                   = "Copyright (c) 2013 Hard Consulting Corporation"
__license__                     = "Dual License: GPLv3 (or later) and Commercial (see LICENSE)"

"""
address		-- PLC register address grammar and classification

    A register address is a kind prefix followed by one or more digits of the kind's alphabet, eg.
D100 (decimal), XFF (hexadecimal) or SD10 (hexadecimal).  The grammar is a table; supporting a new
register kind is a new GRAMMAR entry.  Prefixes are case-sensitive; hexadecimal digits are not.

"""
__all__				= [ 'D', 'X', 'Y', 'M', 'B', 'SD', 'UNKNOWN', 'KINDS', 'GRAMMAR',
                                    'RegisterAddress', 'classify', 'validate', 'parse',
                                    'kind_name', 'format_address' ]

import collections
import string

D				= 'D'		# Data register
X				= 'X'		# Input
Y				= 'Y'		# Output
M				= 'M'		# Internal relay (memory)
B				= 'B'		# Link relay
SD				= 'SD'		# Special register
UNKNOWN				= 'Unknown'

DECIMAL				= frozenset( string.digits )
HEXADECIMAL			= frozenset( string.hexdigits )

rule				= collections.namedtuple(
    'rule', [
        'kind',		# eg. 'D'
        'prefix',	# eg. 'D'
        'alphabet',	# eg. DECIMAL
        'base',		# eg. 10
        'name',		# eg. "D Register"
        'bits',		# True iff bit-addressed (vs. word-addressed)
    ] )

# Evaluated in order; first match wins.
GRAMMAR				= (
    rule( D,	'D',	DECIMAL,	10,	"D Register",	False ),
    rule( X,	'X',	HEXADECIMAL,	16,	"X Register",	True  ),
    rule( Y,	'Y',	HEXADECIMAL,	16,	"Y Register",	True  ),
    rule( M,	'M',	DECIMAL,	10,	"M Register",	True  ),
    rule( B,	'B',	HEXADECIMAL,	16,	"B Register",	True  ),
    rule( SD,	'SD',	HEXADECIMAL,	16,	"SD Register",	False ),
)
KINDS				= { r.kind: r for r in GRAMMAR }


RegisterAddress			= collections.namedtuple(
    'RegisterAddress', [
        'kind',		# One of KINDS, or UNKNOWN
        'text',		# The raw address text, eg. 'D100'
        'offset',	# The numeric offset in the kind's address space (None if UNKNOWN)
    ] )


def _match( text ):
    """Return the first GRAMMAR rule matching text, or None."""
    if not text or not isinstance( text, str ):
        return None
    for r in GRAMMAR:
        digits			= text[len( r.prefix ):]
        if text.startswith( r.prefix ) and digits and all( c in r.alphabet for c in digits ):
            return r
    return None


def classify( text ):
    """Return the register kind of the address text, or UNKNOWN if it matches no grammar rule (or
    is empty or None).  Pure; depends on nothing but the text."""
    r				= _match( text )
    return UNKNOWN if r is None else r.kind


def validate( text ):
    return classify( text ) != UNKNOWN


def parse( text ):
    """Parse address text into a RegisterAddress; an invalid address yields kind UNKNOWN."""
    r				= _match( text )
    if r is None:
        return RegisterAddress( UNKNOWN, text, None )
    return RegisterAddress( r.kind, text, int( text[len( r.prefix ):], r.base ))


def kind_name( text ):
    """The descriptive name of the address' register kind, eg. "D Register" or "Unknown"."""
    r				= _match( text )
    return UNKNOWN if r is None else r.name


def format_address( kind, offset ):
    """Render a kind and offset as address text, in the kind's digit base, eg. ('X',255) ==> 'XFF'."""
    assert kind in KINDS, "Unknown register kind: %r" % ( kind, )
    assert offset >= 0, "Invalid register offset: %r" % ( offset, )
    r				= KINDS[kind]
    return r.prefix + ( "%d" if r.base == 10 else "%X" ) % offset
