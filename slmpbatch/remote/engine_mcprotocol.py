
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
remote.engine_mcprotocol -- SLMP (MC protocol 3E frame) PLC engine, reading and writing registers
"""
__all__				= [ 'engine_mcprotocol' ]

import logging

from .. import address as addr
from .. import misc
from .engine import engine
from .mcprotocol_fixes import mc_client_3e, word_signed, word_unsigned

log				= logging.getLogger( __package__ )


class engine_mcprotocol( engine ):
    """Each session is an mc_client_3e instance.  Word registers (D, SD) are transferred in word
    units, bit registers (X, Y, M, B) in bit units (one 0/1 value per register).  Any failure is
    raised as an Exception by pymcprotocol, and converted into a failure by the client.

    Only a single PLC I/O transaction is allowed to execute on a session, with <session>:...

    """
    def __init__( self, plctype="Q" ):
        self.plctype		= plctype

    def new_session( self, transport, host, port, local_host, local_port, station, timeout ):
        source			= None
        if ( local_host and local_host != '0.0.0.0' ) or local_port:
            source		= ( local_host or '0.0.0.0', local_port or 0 )
        handle			= mc_client_3e( plctype=self.plctype, transport=transport,
                                                source_address=source, station=station, timeout=timeout )
        handle.target		= ( host, port )
        return handle

    def connect( self, handle ):
        with handle:
            handle.connect( *handle.target )
        return 0

    def disconnect( self, handle ):
        with handle:
            handle.close()

    @staticmethod
    def _bits( address ):
        reg			= addr.parse( address )
        assert reg.kind != addr.UNKNOWN, "Invalid register address: %r" % ( address, )
        return addr.KINDS[reg.kind].bits

    def batch_read( self, handle, address, count ):
        bits			= self._bits( address )
        with handle:
            if bits:
                values		= handle.batchread_bitunits( address, count )
            else:
                values		= handle.batchread_wordunits( address, count )
        if len( values ) != count:
            log.warning( "%r/%-6s returned %d of %d values", handle, address, len( values ), count )
            return None
        values			= [ word_unsigned( v ) for v in values ]
        log.debug( "%r/%-6s --> (%3d) %s", handle, address, count, misc.reprlib.repr( values ))
        return values

    def batch_write( self, handle, address, count, values ):
        bits			= self._bits( address )
        if bits:
            encoded		= [ 1 if v else 0 for v in values[:count] ]
        else:
            encoded		= [ word_signed( v ) for v in values[:count] ]
        with handle:
            if bits:
                handle.batchwrite_bitunits( address, encoded )
            else:
                handle.batchwrite_wordunits( address, encoded )
        log.debug( "%r/%-6s <-- (%3d) %s", handle, address, count, misc.reprlib.repr( encoded ))
        return 0
