
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
client		-- A PLC client owning a single session, with serialized batched register access

    plc			= plc_client( host="192.168.5.125", port=2001, transport='TCP' )
    if not plc.open():
        ...
    done		= plc.write( "D1", 3, [ 1, 2, 3 ] )
    got			= plc.read( "D1", 3 )
    if got:
        print( got.value )		# [1, 2, 3]
    else:
        print( got.failure )		# eg. BatchReadFailure(...)
    plc.close()

No read, write, open or close raises an Exception; each returns an outcome that is truthy iff
successful, carrying the .value or the .failure (a PlcFailure instance).

"""
__all__				= [ 'PlcFailure', 'InvalidAddress', 'SizeMismatch', 'SessionOpenFailure',
                                    'BatchReadFailure', 'BatchWriteFailure', 'outcome', 'plc_client' ]

import logging
import threading

from . import address as addr
from . import defaults
from . import misc

log				= logging.getLogger( __package__ )


class PlcFailure( Exception ):
    """A failed PLC client operation, and the register address involved (if any)."""
    def __init__( self, message, address=None ):
        super( PlcFailure, self ).__init__( message )
        self.address		= address

class InvalidAddress( PlcFailure ):
    pass

class SizeMismatch( PlcFailure ):
    pass

class SessionOpenFailure( PlcFailure ):
    pass

class BatchReadFailure( PlcFailure ):
    pass

class BatchWriteFailure( PlcFailure ):
    pass


class outcome( object ):
    """The result of a PLC client operation; truthy iff successful.  Either .value or .failure."""
    __slots__			= ( 'value', 'failure' )

    def __init__( self, value=None, failure=None ):
        self.value		= value
        self.failure		= failure

    def __bool__( self ):
        return self.failure is None

    def __repr__( self ):
        if self.failure is None:
            return "<outcome: %s>" % ( misc.reprlib.repr( self.value ))
        return "<outcome: %s: %s>" % ( self.failure.__class__.__name__, self.failure )

    def result( self ):
        """Return the value, or raise the failure."""
        if self.failure is not None:
            raise self.failure
        return self.value


class plc_client( object ):
    """Owns at most one session (.handle) to a PLC via a protocol 'engine'.  Every batched read/write
    and every open/close holds the client's .lock for its full duration, so at most one is ever in
    flight; writes complete before any subsequent read (on this client) begins.

    Unopened --open()--> Connected --close()--> Unopened.  A failed open() leaves the client Unopened,
    with no session allocated.  Re-opening first tears down any existing session.  Closing is
    best-effort cleanup; it cannot fail, and is a no-op if Unopened.  Garbage collecting the client
    closes it.

    Supply a remote.engine instance; defaults to the SLMP engine_mcprotocol.

    """
    def __init__( self, host=None, port=None, transport=None, local_host=None, local_port=None,
                  station=None, timeout=None, engine=None ):
        self.lock		= threading.Lock()
        self.handle		= None
        self.host		= host if host is not None else defaults.address[0]
        self.port		= int( port if port is not None else defaults.address[1] )
        self.transport		= ( transport or defaults.transport ).upper()
        assert self.transport in defaults.TRANSPORTS, \
            "Invalid PLC Protocol Type: %r" % ( transport, )
        self.local_host		= local_host if local_host is not None else defaults.bind[0]
        self.local_port		= int( local_port if local_port is not None else defaults.bind[1] )
        self.station		= station if station is not None else defaults.CONNECTED_STATION
        self.timeout		= timeout if timeout is not None else defaults.timeout
        if engine is None:
            from .remote.engine_mcprotocol import engine_mcprotocol # Only needed for real PLCs
            engine		= engine_mcprotocol()
        self.engine		= engine
        log.normal( "PLC client has been created: %s", self )

    def __str__( self ):
        return "%s/IP %s:%d" % ( self.transport, self.host, self.port )

    def __del__( self ):
        if getattr( self, 'handle', None ) is not None:
            self.close()

    def __enter__( self ):
        """Open the session (if not already), raising SessionOpenFailure if impossible."""
        if not self.connected:
            self.open().result()
        return self

    def __exit__( self, typ, val, tbk ):
        self.close()
        return False

    @property
    def connected( self ):
        with self.lock:
            return self.handle is not None

    # Address classification; independent of the session
    @staticmethod
    def valid( address ):
        return addr.validate( address )

    @staticmethod
    def kind( address ):
        return addr.classify( address )

    @staticmethod
    def kind_name( address ):
        return addr.kind_name( address )

    def _failed( self, failure ):
        log.warning( "%s: %s", failure.__class__.__name__, failure )
        return outcome( failure=failure )

    # Session lifecycle
    @misc.mutexmethod( 'lock' )
    def open( self, host=None, port=None, transport=None ):
        """(Re-)open the session, optionally to a new host, port and/or transport."""
        if host is not None:
            self.host		= host
        if port is not None:
            self.port		= int( port )
        if transport is not None:
            assert transport.upper() in defaults.TRANSPORTS, \
                "Invalid PLC Protocol Type: %r" % ( transport, )
            self.transport	= transport.upper()
        self._release()

        handle			= None
        reason			= None
        try:
            handle		= self.engine.new_session(
                self.transport, self.host, self.port, self.local_host, self.local_port,
                self.station, self.timeout )
            if handle is None:
                reason		= "session creation failed"
            else:
                status		= self.engine.connect( handle )
                if status != 0:
                    reason	= "connect failed w/ status %r" % ( status, )
        except Exception as exc:
            reason		= str( exc ) or exc.__class__.__name__
        if reason is not None:
            if handle is not None:
                self._teardown( handle )
            return self._failed( SessionOpenFailure(
                "Failed to open PLC session to %s: %s" % ( self, reason )))
        self.handle		= handle
        log.normal( "PLC session established: %s", self )
        return outcome( True )

    @misc.mutexmethod( 'lock' )
    def close( self ):
        """Disconnect and free any session.  Always succeeds; any disconnect errors are ignored."""
        if self.handle is not None:
            self._release()
            log.normal( "PLC session closed: %s", self )
        return outcome( True )

    def _release( self ):
        handle,self.handle	= self.handle,None
        if handle is not None:
            self._teardown( handle )

    def _teardown( self, handle ):
        for method in ( self.engine.disconnect, self.engine.free ):
            try:
                method( handle )
            except Exception as exc:
                log.info( "Ignoring PLC %s failure on %s: %s", method.__name__, self, exc )

    # Batched register access
    def read( self, address, count=1 ):
        """Read 'count' registers starting at 'address'; value[i] is the register at address + i."""
        if not addr.validate( address ):
            return self._failed( InvalidAddress(
                "Invalid register address format: %r" % ( address, ), address=address ))
        if count < 1:
            return self._failed( SizeMismatch(
                "Invalid register read count (%r) at address: %s" % ( count, address ), address=address ))
        return self._read( address, count )

    @misc.mutexmethod( 'lock' )
    def _read( self, address, count ):
        values			= None
        reason			= "session not open"
        if self.handle is not None:
            try:
                values		= self.engine.batch_read( self.handle, address, count )
                reason		= "no data returned"
            except Exception as exc:
                reason		= str( exc ) or exc.__class__.__name__
        if values is not None and len( values ) != count:
            reason		= "%d values returned" % ( len( values ))
            values		= None
        if values is None:
            return self._failed( BatchReadFailure(
                "Failed to batch read %d registers from address: %s: %s" % ( count, address, reason ),
                address=address ))
        log.debug( "%s/%-6s --> (%3d) %s", self, address, count, misc.reprlib.repr( values ))
        return outcome( list( values ))

    def write( self, address, count, payload ):
        """Write the first 'count' values of 'payload' to registers starting at 'address'.  A scalar
        payload is a single value.  Any excess payload values are ignored."""
        if not addr.validate( address ):
            return self._failed( InvalidAddress(
                "Invalid register address format: %r" % ( address, ), address=address ))
        if not hasattr( payload, '__len__' ):
            payload		= [ payload ]
        if count < 1 or len( payload ) < count:
            return self._failed( SizeMismatch(
                "Data size (%d) is smaller than requested write count (%d) at address: %s" % (
                    len( payload ), count, address ), address=address ))
        return self._write( address, count, list( payload[:count] ))

    @misc.mutexmethod( 'lock' )
    def _write( self, address, count, values ):
        reason			= "session not open"
        if self.handle is not None:
            try:
                status		= self.engine.batch_write( self.handle, address, count, values )
                reason		= None if status == 0 else "status %r" % ( status, )
            except Exception as exc:
                reason		= str( exc ) or exc.__class__.__name__
        if reason is not None:
            return self._failed( BatchWriteFailure(
                "Failed to batch write %d registers to address: %s: %s" % ( count, address, reason ),
                address=address ))
        log.debug( "%s/%-6s <-- (%3d) %s", self, address, count, misc.reprlib.repr( values ))
        return outcome( True )
