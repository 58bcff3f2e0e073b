
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
defaults	-- System-wide default (global) values, and configuration file support

    Settings are resolved in order: an explicitly supplied value (eg. from the command-line), the
value found in the configuration file(s) [PLC] or [Benchmark] section, and finally the default
defined here.

"""
__all__				= [ 'station', 'CONNECTED_STATION', 'TRANSPORTS',
                                    'address', 'transport', 'bind', 'timeout',
                                    'variant', 'cycles', 'registers', 'groups', 'group_size', 'interleave', 'start', 'delay', 'pause',
                                    'csv', 'value_range', 'samples',
                                    'config_name', 'config_paths', 'config_files', 'config_loader',
                                    'config_read', 'config_section', 'config_override' ]

import ast
import collections
import configparser
import logging
import os

log				= logging.getLogger( __package__ )

# The SLMP destination "station": network number, PC number, request destination module I/O number
# and module station number.  The "connected station" is the PLC at the other end of the link.
station				= collections.namedtuple(
    'station', [
        'network',	# eg. 0x00
        'pc',		# eg. 0xFF
        'moduleio',	# eg. 0x03FF
        'modulestation',# eg. 0x00
    ] )
CONNECTED_STATION		= station( 0x00, 0xFF, 0x03FF, 0x00 )

TRANSPORTS			= ( 'TCP', 'UDP' )

# PLC connection
address				= ('192.168.5.125', 2001) # The default target PLC (host,port)
transport			= 'TCP'
bind				= ('0.0.0.0', 0)	# Local interface/port; wildcard, ephemeral
timeout				= None		# Use the protocol engine's default

# Benchmark
variant				= 'scattered'	# 'contiguous' or 'scattered'
cycles				= 0		# Benchmark cycles; 0 ==> forever
registers			= 100		# Registers exercised by the contiguous variant
groups				= 10		# Register groups visited by the scattered variant
group_size			= 100		#   each of this many registers
interleave			= None		# Group visit order; None ==> 0, g/2, 1, g/2+1, ...
start				= 1		# First D register exercised, eg. D1
delay				= 2.0		# Seconds between benchmark cycles
pause				= 0.1		# Seconds between each write/read pass
csv				= 'performance_results.csv'
value_range			= (0, 65535)	# Pseudo-random test values (inclusive)
samples				= 10		# Sample registers displayed per cycle

# Define the default paths used for configuration files, etc.
config_name			= 'slmpbatch.cfg'	# Default application configuration file

def config_paths( filename, extra=None ):
    """Yield the configuration search paths in *reverse* order of precedence (furthest or most
    general, to nearest or most specific).

    This is the order that is required by configparser; settings configured in "later" files
    override those in "earlier" ones.

    """
    yield os.path.join( os.path.dirname( __file__ ), '..', filename )		# installation root dir
    yield os.path.join( os.getenv( 'APPDATA', os.sep + 'etc' ), filename )	# global app data dir, eg. /etc/
    yield os.path.join( os.path.expanduser( '~' ), '.slmpbatch', filename )	# user dir, ~username/.slmpbatch/name
    yield os.path.join( os.path.expanduser( '~' ), '.' + filename )		# user dir, ~username/.name
    for e in extra or []:							# any extra dirs...
        yield os.path.join( e, filename )
    yield filename								# current dir (most specific)

# Default configuration files path, In 'configparser' expected order (most general to most specific)
config_files			= list( config_paths( config_name ))

# No config, by default (use default values).  Allows ${<section>:<key>} interpolation, and comments
# anywhere via the # symbol (this implies no # allowed in any value).
config_loader			= configparser.ConfigParser(
    comment_prefixes=('#',), inline_comment_prefixes=('#',),
    allow_no_value=True, empty_lines_in_values=False,
    interpolation=configparser.ExtendedInterpolation() )


def config_read( filenames=None ):
    """Load the standard configuration files (and/or those supplied); returns the files read."""
    found			= config_loader.read( config_files if filenames is None else filenames )
    for fn in found:
        log.normal( "Configuration loaded from: %s", fn )
    return found


def config_section( section, config=None ):
    config			= config_loader if config is None else config
    if section and section in config:
        log.detail( "[{section}]".format( section=section ))
        return config[section]
    log.detail( "[{section}]".format( section='DEFAULT' ))
    return config['DEFAULT']


def config_override( val, key, default=None, section=None, config=None ):
    """Use the provided val (or get key's value from the config section, toggling '_'/' ' so either
    "Group Size" or "group_size" are acceptable config file keys), converting to type of default.

    """
    if val is None:
        sect			= config_section( section, config=config )
        for k in ( key, key.replace( '_', ' ' )):
            val			= sect.get( k, None )
            if val is not None:
                log.info( "  {k:<20} == {val!r} (config)".format( k=k, val=val ))
                break
    if val is None:
        if default is not None:
            log.info( "  {key:<20} == {val!r:<20} (default)".format( key=key, val=default ))
        return default
    if isinstance( default, bool ) and isinstance( val, str ):
        # Python bools supplied as strings or from config files are a special case, eg. 0 or
        # "False" ==> False, 1 or "True' ==> True
        return bool( ast.literal_eval( val.capitalize() ))
    if isinstance( default, (list, tuple) ) and isinstance( val, str ):
        # Complex types eg. "( ... )" must be obtained by ast.literal_eval.
        return type( default )( ast.literal_eval( val ))
    if isinstance( default, (int, float, str) ) and isinstance( val, (bool, int, float, str) ):
        try:
            return type( default )( val )				# eg.   123,  abc
        except ValueError:
            if isinstance( val, str ):
                return type( default )( ast.literal_eval( val ))	# eg. 0x123, "abc"
            raise
    if default is None and isinstance( val, str ):
        # No default type to convert to; accept any Python literal (eg. a numeric timeout)
        try:
            return ast.literal_eval( val )
        except ( ValueError, SyntaxError ):
            return val
    return val
