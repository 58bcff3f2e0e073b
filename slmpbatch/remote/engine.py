
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
remote.engine	-- the SLMP protocol engine interface, and a simulated PLC engine
"""
__all__				= [ 'engine', 'engine_simulator', 'session' ]

import collections
import logging
import threading
import time

from .. import address as addr
from .. import misc

log				= logging.getLogger( __package__ )


class engine( object ):
    """A PLC protocol engine, which knows how to create sessions to a PLC and transfer contiguous runs
    of registers over them.  The client only ever uses these operations, and treats any None or
    non-zero result (or any Exception raised) as a failure:

      .new_session	-- Create a session handle (not yet connected), or None
      .connect		-- Connect the session; 0 on success
      .disconnect	-- Disconnect the session (best effort)
      .free		-- Release the session handle
      .batch_read	-- Read 'count' values from 'address'; a sequence of values, or None
      .batch_write	-- Write the first 'count' 'values' to 'address'; 0 on success

    Derived classes implement these to interface to an actual device.

    """
    def new_session( self, transport, host, port, local_host, local_port, station, timeout ):
        raise NotImplementedError( "new_session" )

    def connect( self, handle ):
        raise NotImplementedError( "connect" )

    def disconnect( self, handle ):
        raise NotImplementedError( "disconnect" )

    def free( self, handle ):
        pass

    def batch_read( self, handle, address, count ):
        raise NotImplementedError( "batch_read" )

    def batch_write( self, handle, address, count, values ):
        raise NotImplementedError( "batch_write" )


class session( object ):
    """A simulated session handle; remembers its connection parameters."""
    def __init__( self, transport, host, port, local_host, local_port, station, timeout ):
        self.transport		= transport
        self.host		= host
        self.port		= port
        self.local_host		= local_host
        self.local_port		= local_port
        self.station		= station
        self.timeout		= timeout
        self.connected		= False
        self.freed		= False

    def __str__( self ):
        return "%s/%s:%s" % ( self.transport, self.host, self.port )


class engine_simulator( engine ):
    """Simulates a PLC's register memory.  Every register of every kind initially holds 0; word
    registers hold 16-bit values, bit registers hold 0/1.  Each kind's registers are independent
    cells indexed by offset; a batch of 'count' registers starting at offset N covers N..N+count-1.

    Instruments every call (in .calls), and allows failures to be injected:

      .refuse		-- new_session returns None
      .unreachable	-- connect fails
      .fail		-- a predicate fail( operation, address, count ) returning True fails that call

    An optional per-call 'latency' (seconds) simulates the round-trip time of a real PLC.

    """
    def __init__( self, latency=None, fail=None ):
        self.latency		= latency
        self.fail		= fail
        self.refuse		= False
        self.unreachable	= False
        self.calls		= collections.Counter()
        self.memory		= collections.defaultdict( dict ) # { kind: { offset: value, ... }, ... }
        self.sessions		= []
        self.lock		= threading.Lock()

    def _call( self, operation, address=None, count=None ):
        self.calls[operation]  += 1
        if self.latency:
            time.sleep( self.latency )
        failing			= bool( self.fail and self.fail( operation, address, count ))
        if failing:
            log.info( "Simulating %s failure: %s (%s)", operation, address, count )
        return failing

    def _session( self, handle ):
        assert handle in self.sessions and not handle.freed, "Invalid session handle: %r" % handle

    def new_session( self, transport, host, port, local_host, local_port, station, timeout ):
        if self._call( 'new_session' ) or self.refuse:
            return None
        handle			= session( transport, host, port, local_host, local_port, station, timeout )
        self.sessions.append( handle )
        return handle

    def connect( self, handle ):
        self._session( handle )
        if self._call( 'connect' ) or self.unreachable:
            return 1
        handle.connected	= True
        log.detail( "Simulated PLC %s connected", handle )
        return 0

    def disconnect( self, handle ):
        self._session( handle )
        self._call( 'disconnect' )
        handle.connected	= False

    def free( self, handle ):
        self._session( handle )
        self._call( 'free' )
        handle.freed		= True
        self.sessions.remove( handle )

    def _target( self, handle, address ):
        """Deduce the register memory and value mask of the address."""
        self._session( handle )
        if not handle.connected:
            return None,None,None
        reg			= addr.parse( address )
        if reg.kind == addr.UNKNOWN:
            return None,None,None
        return self.memory[reg.kind], reg.offset, 1 if addr.KINDS[reg.kind].bits else 0xFFFF

    def batch_read( self, handle, address, count ):
        if self._call( 'batch_read', address, count ):
            return None
        memory,offset,mask	= self._target( handle, address )
        if memory is None or count < 1:
            return None
        with self.lock:
            values		= [ memory.get( offset + i, 0 ) for i in range( count ) ]
        log.debug( "%s/%-6s --> (%3d) %s", handle, address, count, misc.reprlib.repr( values ))
        return values

    def batch_write( self, handle, address, count, values ):
        if self._call( 'batch_write', address, count ):
            return 1
        memory,offset,mask	= self._target( handle, address )
        if memory is None or count < 1 or len( values ) < count:
            return 1
        with self.lock:
            for i in range( count ):
                memory[offset + i] = int( values[i] ) & mask
        log.debug( "%s/%-6s <-- (%3d) %s", handle, address, count, misc.reprlib.repr( values[:count] ))
        return 0
