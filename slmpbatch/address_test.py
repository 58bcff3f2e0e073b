
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

import pytest

from .address import (
    D, X, Y, M, B, SD, UNKNOWN, KINDS, GRAMMAR,
    RegisterAddress, classify, validate, parse, kind_name, format_address,
)


@pytest.mark.parametrize( "text,kind", [
    ( "D0",		D ),
    ( "D100",		D ),
    ( "D8000",		D ),
    ( "X",		UNKNOWN ),
    ( "XFF",		X ),
    ( "Xff",		X ),
    ( "X1F0",		X ),
    ( "Y10",		Y ),
    ( "YG",		UNKNOWN ),
    ( "M12",		M ),
    ( "MFF",		UNKNOWN ),
    ( "B1A",		B ),
    ( "SD10",		SD ),
    ( "SDFF",		SD ),
    ( "SD",		UNKNOWN ),
    ( "DA",		UNKNOWN ),
    ( "D",		UNKNOWN ),
    ( "d5",		UNKNOWN ),
    ( "Q1",		UNKNOWN ),
    ( " D1",		UNKNOWN ),
    ( "D1 ",		UNKNOWN ),
    ( "D-1",		UNKNOWN ),
    ( "",		UNKNOWN ),
    ( None,		UNKNOWN ),
    ( 100,		UNKNOWN ),
] )
def test_classify( text, kind ):
    assert classify( text ) == kind
    assert validate( text ) == ( kind != UNKNOWN )
    # Pure and idempotent
    assert classify( text ) == classify( text )


def test_grammar_table():
    assert [ r.kind for r in GRAMMAR ] == [ D, X, Y, M, B, SD ]
    assert set( KINDS ) == { D, X, Y, M, B, SD }
    # Word registers vs. bit relays/inputs/outputs
    assert [ k for k in KINDS if not KINDS[k].bits ] == [ D, SD ]


def test_parse():
    assert parse( "D100" ) == RegisterAddress( D, "D100", 100 )
    assert parse( "XFF" ) == RegisterAddress( X, "XFF", 255 )
    assert parse( "M12" ) == RegisterAddress( M, "M12", 12 )
    assert parse( "SD10" ) == RegisterAddress( SD, "SD10", 16 )
    assert parse( "Q1" ) == RegisterAddress( UNKNOWN, "Q1", None )
    assert parse( "" ).kind == UNKNOWN


def test_kind_name():
    assert kind_name( "D1" ) == "D Register"
    assert kind_name( "B0" ) == "B Register"
    assert kind_name( "SD0" ) == "SD Register"
    assert kind_name( "nope" ) == "Unknown"
    assert kind_name( None ) == "Unknown"


def test_format_address():
    assert format_address( D, 1000 ) == "D1000"
    assert format_address( X, 255 ) == "XFF"
    assert format_address( SD, 16 ) == "SD10"
    for text in ( "D0", "D501", "X1F", "Y0", "M99", "BFF", "SD1A" ):
        reg			= parse( text )
        assert format_address( reg.kind, reg.offset ) == text
    with pytest.raises( AssertionError ):
        format_address( UNKNOWN, 1 )
    with pytest.raises( AssertionError ):
        format_address( D, -1 )
