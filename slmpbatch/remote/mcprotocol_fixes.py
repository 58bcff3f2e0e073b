
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
__copyright__                   = "Copyright (c) 2015 Hard Consulting Corporation"
__license__                     = "Dual License: GPLv3 (or later) and Commercial (see LICENSE)"

"""
remote.mcprotocol_fixes -- pymcprotocol's Type3E needs some additions.

- Supports UDP/IP as well as TCP/IP transports
- Optionally binds to a local source interface/port
- Applies the destination station and I/O timeout at construction
- Minimal shims to add locking for multi-Thread usage

"""
__all__				= [ 'mc_client_3e', 'word_signed', 'word_unsigned' ]

import logging
import math
import socket
import threading

import pymcprotocol

from ..defaults import TRANSPORTS


def word_signed( value ):
    """pymcprotocol encodes words as signed 16-bit values; convert an unsigned 0-65535 value."""
    value			= int( value ) & 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def word_unsigned( value ):
    return int( value ) & 0xFFFF


class mc_client_3e( pymcprotocol.Type3E ):
    """A Type3E (SLMP 3E frame) client with UDP/TCP transports, local source address binding and
    locking for Threaded connection sharing.  This is a synchronous client, and runs in the calling
    thread.

    If a mutual exclusion lock on a <client> instance is desired, it may be obtained using:

        with <client>:
            ...

    A 'timeout' (seconds) applies to the socket I/O, and (rounded up to whole seconds) to the PLC's
    response monitoring timer.

    """
    def __init__( self, plctype="Q", transport='TCP', source_address=None, station=None,
                  timeout=None ):
        super( mc_client_3e, self ).__init__( plctype=plctype )
        assert transport in TRANSPORTS, \
            "Invalid transport %r; expected one of %s" % ( transport, ", ".join( TRANSPORTS ))
        self.transport		= transport
        self.source_address	= source_address
        self._sock		= None
        self._lock		= threading.Lock()
        if station is not None:
            self.setaccessopt( network=station.network, pc=station.pc,
                               dest_moduleio=station.moduleio, dest_modulesta=station.modulestation )
        if timeout is not None:
            # setaccessopt also resets soc_timeout (to timer_sec + 1); apply ours after
            self.setaccessopt( timer_sec=max( 1, int( math.ceil( timeout ))))
            self.soc_timeout	= timeout
        else:
            self.soc_timeout	= getattr( self, 'soc_timeout', 2 )

    def __repr__( self ):
        return "<%s: %s>" % ( self.__class__.__name__, self._sock.__repr__() if self._sock else "closed" )

    def connect( self, ip, port ):
        """Connect (or, for UDP/IP, just designate the peer of) a new socket, optionally bound to the
        source address.  Any socket error is raised, leaving the client closed."""
        self._ip		= ip
        self._port		= port
        sock			= socket.socket(
            socket.AF_INET, socket.SOCK_DGRAM if self.transport == 'UDP' else socket.SOCK_STREAM )
        try:
            sock.settimeout( self.soc_timeout )
            if self.source_address:
                sock.bind( self.source_address )
            sock.connect( (ip, port) )
        except Exception:
            sock.close()
            raise
        self._sock		= sock
        self._is_connected	= True
        logging.debug( "Connected %r via %s/IP to %s:%s", self, self.transport, ip, port )

    def close( self ):
        sock,self._sock		= self._sock,None
        self._is_connected	= False
        if sock is not None:
            sock.close()

    def __enter__( self ):
        self._lock.acquire( True )
        logging.debug( "Acquired lock on %r", self )
        return self

    def __exit__( self, typ, val, tbk ):
        logging.debug( "Release  lock on %r", self )
        self._lock.release()
        return False
