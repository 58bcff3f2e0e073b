
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

import csv
import io
import logging
import math

import pytz

from .results import (
    CONTIGUOUS, SCATTERED, benchmark_result, csv_sink, log_sink, print_sink, multi_sink,
)
from .times import timestamp


def scattered_result( **kwds ):
    result			= benchmark_result(
        cycle=3, variant=SCATTERED, timestamp=1396368672.345,
        write_batched=20000, write_sequential=400000,
        read_batched=30000, read_sequential=100000, **kwds )
    result.samples.append( ( "D1-D100", "D1", 7, 7, 7 ))
    return result


def test_result_ratios():
    result			= scattered_result()
    assert result.write_ratio == 0.05
    assert result.read_ratio == 0.3
    assert ( result.total_batched, result.total_sequential ) == ( 50000, 500000 )
    assert result.total_ratio == 0.1
    assert result.integrity == "PASS"

    result.variant		= CONTIGUOUS
    assert result.write_ratio == 20.0
    assert math.isnan( benchmark_result( cycle=1 ).total_ratio )


def test_csv_sink( tmp_path ):
    filename			= str( tmp_path / "results.csv" )
    with open( filename, 'w' ) as f:
        f.write( "stale\n" )
    sink			= csv_sink( filename )
    sink( scattered_result() )
    failed			= scattered_result()
    failed.integrity_ok		= False
    sink( failed )

    with open( filename, newline='' ) as f:
        rows			= list( csv.reader( f ))
    assert rows[0] == [
        "Timestamp", "Cycle",
        "Write_Scattered_us", "Write_Sequential_us", "Write_Ratio",
        "Read_Scattered_us", "Read_Sequential_us", "Read_Ratio",
        "Data_Integrity",
        "Total_Scattered_us", "Total_Sequential_us", "Total_Ratio",
    ]
    assert len( rows ) == 3
    assert rows[1][0] == str( timestamp( 1396368672.345 ))
    assert rows[1][1:] == [ "3", "20000", "400000", "0.05", "30000", "100000", "0.30",
                            "PASS", "50000", "500000", "0.10" ]
    assert rows[2][8] == "FAIL"

    assert csv_sink( filename, variant=CONTIGUOUS ).header[2] == "Write_Batch_us"


def test_log_sink( caplog ):
    result			= scattered_result()
    result.integrity_ok		= False
    result.mismatches.append( "Data mismatch in D1-D100 at offset 0 (D1): scattered=1, sequential=2" )
    result.failures.append( "Failed to read from group: D1-D100" )
    with caplog.at_level( logging.DEBUG ):
        log_sink()( result )
    warnings			= [ r.getMessage() for r in caplog.records if r.levelno == logging.WARNING ]
    assert warnings == [
        "Cycle 3 failure: Failed to read from group: D1-D100",
        "Cycle 3 mismatch: Data mismatch in D1-D100 at offset 0 (D1): scattered=1, sequential=2",
    ]
    assert any( "Data integrity: FAILED" == r.getMessage() for r in caplog.records )


def test_print_sink():
    out				= io.StringIO()
    result			= scattered_result()
    multi_sink( print_sink( file=out ), None )( result )
    text			= out.getvalue()
    assert "=== SAMPLE DATA ===" in text
    assert "D1-D100" in text
    assert "Ratio:" in text and "(Scattered/Sequential)" in text
    assert "✓ Data integrity: PASSED" in text

    out				= io.StringIO()
    result.variant		= CONTIGUOUS
    result.integrity_ok		= False
    result.mismatches.append( "Size mismatch" )
    print_sink( file=out )( result )
    text			= out.getvalue()
    assert "Speedup:" in text
    assert "✗ Size mismatch" in text
    assert "✗ Data integrity: FAILED" in text


def test_timestamp():
    ts				= timestamp( 1396368672.345 )
    assert float( ts ) == 1396368672.345
    assert ts.render( tzinfo=pytz.utc ) == "2014-04-01 16:11:12.345"
    assert ts.render( tzinfo=pytz.timezone( 'Canada/Mountain' )) == "2014-04-01 10:11:12.345"
    assert len( str( ts )) == len( "2014-04-01 10:11:12.345" )
    assert str( ts ) is str( ts )
    assert abs( timestamp().value - timestamp().value ) < 1.0
