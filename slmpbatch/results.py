
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
results		-- Benchmark cycle results, and the sinks that report and persist them

A sink is any callable accepting a benchmark_result; eg. a list's .append is a fine sink for testing.

"""
__all__				= [ 'CONTIGUOUS', 'SCATTERED', 'VARIANTS', 'benchmark_result',
                                    'csv_sink', 'log_sink', 'print_sink', 'multi_sink' ]

import csv
import dataclasses
import logging
import sys

from . import misc
from .times import timestamp

log				= logging.getLogger( __package__ )

CONTIGUOUS			= 'contiguous'	# Sequential single vs. one contiguous batch
SCATTERED			= 'scattered'	# Sequential single vs. interleaved group batches
VARIANTS			= ( CONTIGUOUS, SCATTERED )


@dataclasses.dataclass
class benchmark_result:
    """One benchmark cycle's durations (integer microseconds), integrity verdict and diagnostics.

    The "batched" pass is the contiguous batch or the scattered group batches, depending on variant.
    The ratios are sequential/batched (a speedup) for the contiguous variant, and
    scattered/sequential for the scattered variant.

    """
    cycle: int
    variant: str			= CONTIGUOUS
    timestamp: float			= None
    write_batched: int			= 0
    write_sequential: int		= 0
    read_batched: int			= 0
    read_sequential: int		= 0
    integrity_ok: bool			= True
    mismatches: list			= dataclasses.field( default_factory=list )
    failures: list			= dataclasses.field( default_factory=list )
    samples: list			= dataclasses.field( default_factory=list ) # (label, address, written, batched, sequential)

    def ratio( self, batched, sequential ):
        if self.variant == SCATTERED:
            return misc.ratio( batched, sequential )
        return misc.ratio( sequential, batched )

    @property
    def write_ratio( self ):
        return self.ratio( self.write_batched, self.write_sequential )

    @property
    def read_ratio( self ):
        return self.ratio( self.read_batched, self.read_sequential )

    @property
    def total_batched( self ):
        return self.write_batched + self.read_batched

    @property
    def total_sequential( self ):
        return self.write_sequential + self.read_sequential

    @property
    def total_ratio( self ):
        return self.ratio( self.total_batched, self.total_sequential )

    @property
    def integrity( self ):
        return "PASS" if self.integrity_ok else "FAIL"


def batched_label( variant ):
    return "Scattered" if variant == SCATTERED else "Batch"


class csv_sink( object ):
    """Persist one row per cycle to a CSV file.  The header is written (truncating any existing file)
    when the sink is created; each row is appended, and the file closed, as each cycle completes."""
    def __init__( self, filename, variant=SCATTERED ):
        self.filename		= filename
        label			= batched_label( variant )
        self.header		= [
            "Timestamp", "Cycle",
            "Write_%s_us" % label, "Write_Sequential_us", "Write_Ratio",
            "Read_%s_us" % label, "Read_Sequential_us", "Read_Ratio",
            "Data_Integrity",
            "Total_%s_us" % label, "Total_Sequential_us", "Total_Ratio",
        ]
        with open( self.filename, 'w', newline='' ) as f:
            csv.writer( f ).writerow( self.header )
        log.normal( "CSV file created: %s", self.filename )

    def row( self, result ):
        return [
            str( timestamp( result.timestamp )), result.cycle,
            result.write_batched, result.write_sequential, "%.2f" % result.write_ratio,
            result.read_batched, result.read_sequential, "%.2f" % result.read_ratio,
            result.integrity,
            result.total_batched, result.total_sequential, "%.2f" % result.total_ratio,
        ]

    def __call__( self, result ):
        with open( self.filename, 'a', newline='' ) as f:
            csv.writer( f ).writerow( self.row( result ))
        log.detail( "Data logged to CSV: %s", self.filename )


class log_sink( object ):
    """Log a summary of each cycle at NORMAL level, and each mismatch and failure as a warning."""
    def __init__( self, logger=None ):
        self.log		= logger or log

    def __call__( self, result ):
        label			= batched_label( result.variant )
        for failure in result.failures:
            self.log.warning( "Cycle %d failure: %s", result.cycle, failure )
        for mismatch in result.mismatches:
            self.log.warning( "Cycle %d mismatch: %s", result.cycle, mismatch )
        self.log.normal( "Cycle %d completed - Write: %s=%dμs, Sequential=%dμs, Ratio=%.2fx",
                         result.cycle, label, result.write_batched, result.write_sequential,
                         result.write_ratio )
        self.log.normal( "Cycle %d completed - Read: %s=%dμs, Sequential=%dμs, Ratio=%.2fx",
                         result.cycle, label, result.read_batched, result.read_sequential,
                         result.read_ratio )
        self.log.normal( "Data integrity: %s", "PASSED" if result.integrity_ok else "FAILED" )


class print_sink( object ):
    """Print each cycle's sample data, performance comparison and data integrity to a terminal."""
    def __init__( self, file=None ):
        self.file		= file

    def __call__( self, result ):
        out			= self.file or sys.stdout
        label			= batched_label( result.variant )
        print( "\n=== SAMPLE DATA ===", file=out )
        print( "%-12s | %-8s | %7s | %9s | %10s" % ( "Group", "Register", "Written", label, "Sequential" ), file=out )
        print( "%s|%s|%s|%s|%s" % ( "-" * 13, "-" * 10, "-" * 9, "-" * 11, "-" * 11 ), file=out )
        for grp,reg,wrt,bat,seq in result.samples:
            print( "%-12s | %-8s | %7s | %9s | %10s" % ( grp, reg, wrt, bat, seq ), file=out )

        speedup			= result.variant != SCATTERED
        print( "\n=== PERFORMANCE COMPARISON ===", file=out )
        for name,bat,seq,rat in (
                ( "Write", result.write_batched, result.write_sequential, result.write_ratio ),
                ( "Read",  result.read_batched,  result.read_sequential,  result.read_ratio )):
            print( "%s Operations:" % name, file=out )
            print( "  %-12s %10d μs" % ( label + ":", bat ), file=out )
            print( "  %-12s %10d μs" % ( "Sequential:", seq ), file=out )
            print( "  %-12s %10.2fx%s" % (
                "Speedup:" if speedup else "Ratio:", rat,
                "" if speedup else " (%s/Sequential)" % label ), file=out )

        print( "\n=== DATA INTEGRITY CHECK ===", file=out )
        for mismatch in result.mismatches:
            print( "✗ %s" % mismatch, file=out )
        for failure in result.failures:
            print( "✗ %s" % failure, file=out )
        print( "%s Data integrity: %s" % (
            "✓" if result.integrity_ok else "✗", "PASSED" if result.integrity_ok else "FAILED" ), file=out )


class multi_sink( object ):
    """Deliver each result to every one of the supplied sinks, in order."""
    def __init__( self, *sinks ):
        self.sinks		= [ s for s in sinks if s is not None ]

    def __call__( self, result ):
        for sink in self.sinks:
            sink( result )
