
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

__all__				= [ "timestamp", "get_localzone" ]

import datetime
import time

# Installed packages (eg. pip/setup.py install pytz tzlocal)
import pytz
from tzlocal import get_localzone


class timestamp( object ):
    """Initialize from a unix timestamp (default: now), and produce a float timestamp value or a local
    time string, to millisecond precision, eg. '2014-04-01 10:11:12.345'.

    Always has a .value which is the unix timestamp as a float.  The string version is lazily produced.

    """
    UTC				= pytz.utc
    LOC				= get_localzone()	# from environment TZ, /etc/timezone, etc.

    _precision			= 3			# How many default sub-second digits
    _fmt			= '%Y-%m-%d %H:%M:%S'	# 2014-04-01 10:11:12

    def __init__( self, value=None ):
        self.value		= time.time() if value is None else float( value )
        self._str		= None

    def __float__( self ):
        return self.value

    def __repr__( self ):
        return '<%s: %s>' % ( self.__class__.__name__, self )

    def __str__( self ):
        if self._str is None:
            self._str		= self.render()
        return self._str

    def datetime( self, tzinfo=None ):
        """The timestamp as an aware datetime in the given (default: local) timezone."""
        utc			= datetime.datetime.fromtimestamp( self.value, tz=self.UTC )
        return utc.astimezone( self.LOC if tzinfo is None else tzinfo )

    def render( self, tzinfo=None ):
        dt			= self.datetime( tzinfo=tzinfo )
        sub			= dt.microsecond // 10 ** ( 6 - self._precision )
        return dt.strftime( self._fmt ) + ( '.%0*d' % ( self._precision, sub ))
