
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
verify		-- Benchmark batched vs. sequential register access, and verify they agree

Each cycle writes a fresh set of pseudo-random values to a span of D registers, twice: once using
one single-register write per register (sequential), and once using batched writes (one contiguous
batch, or several groups of registers visited in an interleaved order).  Then the span is read back
both ways.  Every register's value read via the batched pattern must equal the value read
sequentially from the same absolute register; any mismatch is reported, and fails the cycle's data
integrity.

The interleaved (scattered) group order, eg. 0,5,1,6,2,7,3,8,4,9 for 10 groups, alternates between
groups from the first and second halves of the span, rather than visiting them in address order.

"""
__all__				= [ 'register_group', 'interleave', 'scattered_groups', 'verifier' ]

import dataclasses
import logging
import random
import time

from . import address as addr
from . import defaults
from . import misc
from .client import InvalidAddress, outcome
from .results import CONTIGUOUS, SCATTERED, VARIANTS, benchmark_result
from .times import timestamp

log				= logging.getLogger( __package__ )


@dataclasses.dataclass( frozen=True )
class register_group:
    """A labelled, contiguous span of 'count' D registers, beginning at offset 'start'."""
    start: int
    count: int
    label: str			= None

    def __post_init__( self ):
        assert self.start >= 1, "Invalid register group start: %r" % ( self.start, )
        assert self.count > 0, "Invalid register group count: %r" % ( self.count, )
        if self.label is None:
            object.__setattr__( self, 'label', "%s-%s" % (
                addr.format_address( addr.D, self.start ), addr.format_address( addr.D, self.end )))

    @property
    def end( self ):
        return self.start + self.count - 1

    @property
    def address( self ):
        return addr.format_address( addr.D, self.start )


def interleave( groups ):
    """Visit the first half and second half of the groups alternately, eg. 0,5,1,6,2,7,3,8,4,9."""
    half			= ( groups + 1 ) // 2
    order			= []
    for i in range( half ):
        order.append( i )
        if i + half < groups:
            order.append( i + half )
    return order


def scattered_groups( groups=None, size=None, start=None ):
    """The register groups; group k covers D(start+size*k) .. D(start+size*k+size-1)."""
    groups			= defaults.groups if groups is None else groups
    size			= defaults.group_size if size is None else size
    start			= defaults.start if start is None else start
    assert groups > 0, "Invalid register group count: %r" % ( groups, )
    return [ register_group( start + size * k, size ) for k in range( groups ) ]


class verifier( object ):
    """Drives benchmark cycles against a plc_client.  Each cycle proceeds through the phases:

      generate		-- new pseudo-random values for every register
      write_*		-- write them, via the sequential and batched patterns
      read_*		-- read them back, via the sequential and batched patterns
      verify		-- compare batched vs. sequential values at every register
      report		-- deliver the benchmark_result to the sink

    The contiguous variant runs its sequential passes first; the scattered variant its batched (group)
    passes first.  A .pause is taken between each write/read pass, and a .delay between cycles.

    Any individual read/write failure is reported, and the affected value(s) default to 0; the cycle
    continues.  A failed read fails the cycle's data integrity.

    The random source, result sink, timer and sleep are all injectable.

    """
    def __init__( self, plc, variant=CONTIGUOUS, registers=None, groups=None, group_size=None,
                  start=None, order=None, sink=None, rng=None, timer=None, sleep=None,
                  delay=None, pause=None, value_range=None, samples=None ):
        assert variant in VARIANTS, "Invalid benchmark variant: %r" % ( variant, )
        self.plc		= plc
        self.variant		= variant
        start			= defaults.start if start is None else start
        if variant == CONTIGUOUS:
            self.groups		= [ register_group( start, defaults.registers if registers is None else registers ) ]
        else:
            self.groups		= scattered_groups( groups=groups, size=group_size, start=start )
            if order is None:
                order		= defaults.interleave
        self.order		= list( interleave( len( self.groups )) if order is None else order )
        assert sorted( self.order ) == list( range( len( self.groups ))), \
            "Group order %r must visit each of %d groups exactly once" % ( self.order, len( self.groups ))
        self.base		= self.groups[0].start
        self.total		= sum( g.count for g in self.groups )
        for g,h in zip( self.groups, self.groups[1:] ):
            assert h.start == g.end + 1, "Register groups %s and %s are not adjacent" % ( g.label, h.label )

        self.sink		= sink
        self.rng		= rng or random.Random()
        self.timer		= timer or misc.timer
        self.sleep		= sleep or time.sleep
        self.delay		= defaults.delay if delay is None else delay
        self.pause		= defaults.pause if pause is None else pause
        self.value_range	= value_range or defaults.value_range
        self.samples		= defaults.samples if samples is None else samples

        if variant == CONTIGUOUS:
            passes		= [ 'write_sequential', 'write_batched', 'read_sequential', 'read_batched' ]
        else:
            passes		= [ 'write_batched', 'write_sequential', 'read_batched', 'read_sequential' ]
        self.phases		= [ 'generate' ] + passes + [ 'verify', 'report' ]
        self.phase		= self.phases[0]
        self.cycles		= 0
        self.result		= None
        self.values		= []		# Values written in the current cycle
        self.sequential		= []		#   and read back, one register at a time
        self.batched		= []		#   and read back, a group at a time (indexed by group)

    def __str__( self ):
        return "%s %s benchmark of %s-%s in %d group(s)" % (
            self.plc, self.variant, addr.format_address( addr.D, self.base ),
            addr.format_address( addr.D, self.base + self.total - 1 ), len( self.groups ))

    def register( self, index ):
        """The address of the register at 'index' within the span."""
        return addr.format_address( addr.D, self.base + index )

    def prepare( self ):
        """Validate every group's address; an outcome, failed if any group address is invalid."""
        for g in self.groups:
            if not self.plc.valid( g.address ):
                log.warning( "Invalid register address: %s", g.address )
                return outcome( failure=InvalidAddress(
                    "Invalid register group address: %s" % ( g.address, ), address=g.address ))
        log.normal( "All register addresses validated successfully" )
        log.normal( "Testing %s access pattern: %s", self.variant,
                    " -> ".join( self.groups[k].label for k in self.order ))
        return outcome( True )

    # The state machine
    def step( self ):
        """Perform the current phase and advance to the next.  Returns the benchmark_result when the
        'report' phase completes a cycle, otherwise None."""
        phase			= self.phase
        index			= self.phases.index( phase )
        if phase.startswith( ( 'write', 'read' )) and self.phases[index-1] != 'generate' and self.pause:
            self.sleep( self.pause )
        log.debug( "Cycle %d: %s", self.cycles, phase )
        getattr( self, '_' + phase )()
        self.phase		= self.phases[( index + 1 ) % len( self.phases )]
        if phase == 'report':
            return self.result
        return None

    def cycle( self ):
        """Run one complete cycle, returning its benchmark_result."""
        assert self.phase == self.phases[0], "Cycle already in progress: %s" % self.phase
        while True:
            result		= self.step()
            if result is not None:
                return result

    def run( self, cycles=None ):
        """Open the PLC session if necessary, and then run the specified number of cycles (forever, if
        None/0).  Returns an outcome; failed if the session cannot be opened or an address is
        invalid, or with the number of cycles failing their data integrity check."""
        ready			= self.prepare()
        if not ready:
            return ready
        if not self.plc.connected:
            opened		= self.plc.open()
            if not opened:
                return opened
        failed			= 0
        completed		= 0
        while not cycles or completed < cycles:
            if completed and self.delay:
                log.detail( "Waiting %s seconds before next cycle...", self.delay )
                self.sleep( self.delay )
            result		= self.cycle()
            completed	       += 1
            failed	       += 0 if result.integrity_ok else 1
        return outcome( failed )

    # The phases
    def _generate( self ):
        self.cycles	       += 1
        lo,hi			= self.value_range
        self.values		= [ self.rng.randint( lo, hi ) for _ in range( self.total ) ]
        self.sequential		= []
        self.batched		= [ None ] * len( self.groups )
        self.result		= benchmark_result( cycle=self.cycles, variant=self.variant )
        log.detail( "Starting test cycle #%d: %s", self.cycles, self )

    def _write_sequential( self ):
        begun			= self.timer()
        for i,value in enumerate( self.values ):
            register		= self.register( i )
            if not self.plc.write( register, 1, value ):
                self.result.failures.append( "Failed to write to register: %s" % register )
            self._progress( "Wrote", i )
        self.result.write_sequential = misc.microseconds( self.timer() - begun )

    def _write_batched( self ):
        begun			= self.timer()
        for k in self.order:
            g			= self.groups[k]
            offset		= g.start - self.base
            if not self.plc.write( g.address, g.count, self.values[offset:offset+g.count] ):
                self.result.failures.append( "Failed to write to group: %s" % g.label )
            else:
                log.debug( "Successfully wrote to group: %s", g.label )
        self.result.write_batched = misc.microseconds( self.timer() - begun )

    def _read_sequential( self ):
        begun			= self.timer()
        for i in range( self.total ):
            register		= self.register( i )
            got			= self.plc.read( register, 1 )
            if got:
                self.sequential.append( got.value[0] )
            else:
                self.result.failures.append( "Failed to read from register: %s" % register )
                self.result.integrity_ok = False
                self.sequential.append( 0 )
            self._progress( "Read", i )
        self.result.read_sequential = misc.microseconds( self.timer() - begun )

    def _read_batched( self ):
        begun			= self.timer()
        for k in self.order:
            g			= self.groups[k]
            got			= self.plc.read( g.address, g.count )
            if got:
                self.batched[k]	= got.value
                log.debug( "Successfully read from group: %s", g.label )
            else:
                self.result.failures.append( "Failed to read from group: %s" % g.label )
                self.result.integrity_ok = False
                self.batched[k]	= [ 0 ] * g.count
        self.result.read_batched = misc.microseconds( self.timer() - begun )

    def _progress( self, action, index ):
        size			= self.groups[0].count if len( self.groups ) > 1 else defaults.group_size
        if ( index + 1 ) % size == 0 or index + 1 == self.total:
            log.detail( "%s up to %s (%d/%d)", action, self.register( index ), index + 1, self.total )

    def _verify( self ):
        """Compare every batched value to the sequentially read value of the same register.  Reports
        all mismatches; never stops at the first."""
        result			= self.result
        if len( self.sequential ) != self.total:
            result.mismatches.append( "Sequential data size mismatch: expected %d, got %d" % (
                self.total, len( self.sequential )))
            result.integrity_ok	= False
        for k,g in enumerate( self.groups ):
            data		= self.batched[k]
            if data is None or len( data ) != g.count:
                result.mismatches.append( "Size mismatch in %s group %s: expected %d, got %s" % (
                    self.variant, g.label, g.count, None if data is None else len( data )))
                result.integrity_ok = False
                continue
            offset		= g.start - self.base
            for j in range( g.count ):
                index		= offset + j
                if index >= len( self.sequential ):
                    result.mismatches.append( "Sequential data index out of bounds at %d" % index )
                    result.integrity_ok = False
                    break
                if data[j] != self.sequential[index]:
                    result.mismatches.append( "Data mismatch in %s at offset %d (%s): %s=%d, sequential=%d" % (
                        g.label, j, self.register( index ), self.variant, data[j], self.sequential[index] ))
                    result.integrity_ok = False

        # Sample the head of the span (contiguous), or of each group (scattered)
        if self.variant == SCATTERED:
            heads		= [ (g.label, g.start - self.base, k, 0) for k,g in enumerate( self.groups ) ]
        else:
            heads		= [ (self.groups[0].label, j, 0, j) for j in range( min( self.samples, self.total )) ]
        for label,index,k,j in heads:
            data		= self.batched[k] or []
            result.samples.append( (
                label, self.register( index ), self.values[index],
                data[j] if j < len( data ) else None,
                self.sequential[index] if index < len( self.sequential ) else None ))

        if result.integrity_ok:
            log.detail( "All data integrity checks passed" )

    def _report( self ):
        self.result.timestamp	= timestamp().value
        if self.sink is not None:
            self.sink( self.result )
