
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

'''
slmp_bench.py	-- Benchmark and verify batched vs. sequential SLMP PLC register access

OPTIONS

  --address <addr>[:port]	PLC to connect to (default 192.168.5.125:2001)
  --udp				Use UDP/IP instead of TCP/IP
  --variant contiguous|scattered	The access pattern to compare against sequential access
  --cycles N			Stop after N cycles (default: 0, forever)

EXAMPLE

  slmp_bench --address 192.168.5.125:2001 --variant scattered --cycles 10 -v

    Writes/reads D1-D1000 as 10 interleaved groups of 100 registers, and again one register at a
    time, verifying that both agree; repeats 10 times, logging the timings to a CSV file.

'''
import argparse
import logging
import random
import sys

import slmpbatch
from slmpbatch import defaults, misc
from slmpbatch.client import plc_client
from slmpbatch.remote.engine import engine_simulator
from slmpbatch.results import VARIANTS, csv_sink, log_sink, print_sink, multi_sink
from slmpbatch.verify import verifier

log				= logging.getLogger( 'slmp_bench' )


def main( argv=None ):
    """Run the SLMP batched register access benchmark; returns a non-zero exit status on failure to
    connect, invalid configuration, or any cycle failing its data integrity check.

    """
    ap				= argparse.ArgumentParser(
        description = "SLMP PLC batched vs. sequential register access benchmark and verifier",
        formatter_class = argparse.RawDescriptionHelpFormatter,
        epilog = """\

Each cycle writes pseudo-random values to a span of D registers and reads them
back, both one register at a time (sequential) and in batches; the batches are
either one contiguous run (--variant contiguous), or several groups of
registers visited in an interleaved order (--variant scattered).  Every value
read via batches must match the value read sequentially from the same register.

Any option not supplied is taken from the [PLC] or [Benchmark] section of the
%s configuration file(s), if found.
""" % ( defaults.config_name ))

    ap.add_argument( '-v', '--verbose', action="count",
                     default=0,
                     help="Display logging information." )
    ap.add_argument( '-l', '--log',
                     help="Log file, if desired" )
    ap.add_argument( '-c', '--config', action='append',
                     help="Add another (higher priority) config file path." )
    ap.add_argument( '--no-config', action='store_true',
                     default=False,
                     help="Disable loading of config files (default: False)" )
    ap.add_argument( '-a', '--address',
                     default=None,
                     help="PLC interface[:port] to connect to (default: %s:%d)" % (
                         defaults.address[0], defaults.address[1] ))
    ap.add_argument( '-u', '--udp', action='store_true',
                     default=None,
                     help="Use UDP/IP (default: %s/IP)" % ( defaults.transport ))
    ap.add_argument( '--bind',
                     default=None,
                     help="Local interface[:port] to bind to (default: %s:%d)" % (
                         defaults.bind[0], defaults.bind[1] ))
    ap.add_argument( '--network',
                     default=None,
                     help="Destination network number (default: 0x%02X)" % ( defaults.CONNECTED_STATION.network ))
    ap.add_argument( '--pc',
                     default=None,
                     help="Destination PC number (default: 0x%02X)" % ( defaults.CONNECTED_STATION.pc ))
    ap.add_argument( '-t', '--timeout',
                     default=None,
                     help="PLC I/O timeout (default: engine default)" )
    ap.add_argument( '--variant', choices=VARIANTS,
                     default=None,
                     help="Batched access pattern (default: %s)" % ( defaults.variant ))
    ap.add_argument( '--registers',
                     default=None,
                     help="Registers exercised by the contiguous variant (default: %d)" % ( defaults.registers ))
    ap.add_argument( '--groups',
                     default=None,
                     help="Register groups used by the scattered variant (default: %d)" % ( defaults.groups ))
    ap.add_argument( '--group-size',
                     default=None,
                     help="Registers in each group (default: %d)" % ( defaults.group_size ))
    ap.add_argument( '--interleave',
                     default=None,
                     help="Group visit order, eg. 0,5,1,6,2,7,3,8,4,9 (default: first/second half alternating)" )
    ap.add_argument( '--start',
                     default=None,
                     help="First D register offset (default: %d)" % ( defaults.start ))
    ap.add_argument( '--cycles',
                     default=None,
                     help="Benchmark cycles; 0 runs forever (default: %d)" % ( defaults.cycles ))
    ap.add_argument( '--delay',
                     default=None,
                     help="Seconds between cycles (default: %s)" % ( defaults.delay ))
    ap.add_argument( '--pause',
                     default=None,
                     help="Seconds between each write/read pass (default: %s)" % ( defaults.pause ))
    ap.add_argument( '--seed',
                     default=None,
                     help="Seed the pseudo-random test values (default: unseeded)" )
    ap.add_argument( '--csv',
                     default=None,
                     help="CSV file to log each cycle to; '' for none (default: %s)" % ( defaults.csv ))
    ap.add_argument( '--print', action='store_true',
                     default=True,
                     help="Print each cycle's sample data and comparison to stdout (default: True)" )
    ap.add_argument( '--no-print', action='store_false', dest='print',
                     help="Disable printing of each cycle's results to stdout" )
    ap.add_argument( '-s', '--simulate', action='store_true',
                     default=False,
                     help="Benchmark a simulated (in-memory) PLC, instead of a real one" )
    ap.add_argument( '--latency',
                     default=None,
                     help="Simulated PLC per-request latency, in seconds (default: 0)" )

    args			= ap.parse_args( argv )

    # Set up logging level (-v...) and --log <file>
    levelmap 			= {
        0: logging.WARNING,
        1: logging.NORMAL,
        2: logging.DETAIL,
        3: logging.INFO,
        4: logging.DEBUG,
        }
    slmpbatch.log_cfg['level']	= ( levelmap[args.verbose]
                                    if args.verbose in levelmap
                                    else logging.DEBUG )
    if args.log:
        slmpbatch.log_cfg['filename'] = args.log

    logging.basicConfig( **slmpbatch.log_cfg )

    if not args.no_config:
        loaded			= defaults.config_read( defaults.config_files + ( args.config or [] ))
        log.normal( "Loaded config files: %r", loaded )

    # Resolve each setting: command-line, else config file, else default.
    try:
        address			= misc.parse_ip_port(
            defaults.config_override( args.address, 'address', "%s:%d" % defaults.address, section='PLC' ),
            default=defaults.address )
        transport		= 'UDP' if args.udp else defaults.config_override(
            None, 'transport', defaults.transport, section='PLC' ).upper()
        bind			= misc.parse_ip_port(
            defaults.config_override( args.bind, 'bind', "%s:%d" % defaults.bind, section='PLC' ),
            default=defaults.bind )
        station			= defaults.CONNECTED_STATION._replace(
            network	= defaults.config_override( args.network, 'network', defaults.CONNECTED_STATION.network, section='PLC' ),
            pc		= defaults.config_override( args.pc, 'pc', defaults.CONNECTED_STATION.pc, section='PLC' ))
        timeout			= defaults.config_override( args.timeout, 'timeout', defaults.timeout, section='PLC' )
        timeout			= None if timeout is None else float( timeout )

        variant			= defaults.config_override( args.variant, 'variant', defaults.variant, section='Benchmark' )
        registers		= defaults.config_override( args.registers, 'registers', defaults.registers, section='Benchmark' )
        groups			= defaults.config_override( args.groups, 'groups', defaults.groups, section='Benchmark' )
        group_size		= defaults.config_override( args.group_size, 'group_size', defaults.group_size, section='Benchmark' )
        order			= defaults.config_override( args.interleave, 'interleave', defaults.interleave, section='Benchmark' )
        order			= None if order is None else [ int( k ) for k in ( order if hasattr( order, '__iter__' ) else [ order ] ) ]
        start			= defaults.config_override( args.start, 'start', defaults.start, section='Benchmark' )
        cycles			= defaults.config_override( args.cycles, 'cycles', defaults.cycles, section='Benchmark' )
        delay			= defaults.config_override( args.delay, 'delay', defaults.delay, section='Benchmark' )
        pause			= defaults.config_override( args.pause, 'pause', defaults.pause, section='Benchmark' )
        seed			= defaults.config_override( args.seed, 'seed', None, section='Benchmark' )
        filename		= defaults.config_override( args.csv, 'csv', defaults.csv, section='Benchmark' )
        latency			= float( defaults.config_override( args.latency, 'latency', 0.0, section='Benchmark' ))

        engine			= None
        if args.simulate:
            engine		= engine_simulator( latency=latency or None )
        plc			= plc_client(
            host=address[0], port=address[1], transport=transport, local_host=bind[0], local_port=bind[1],
            station=station, timeout=timeout, engine=engine )

        bench			= verifier(
            plc, variant=variant, registers=registers, groups=groups, group_size=group_size,
            start=start, order=order, rng=random.Random( seed ), delay=delay, pause=pause,
            sink=multi_sink(
                log_sink(),
                csv_sink( filename, variant=variant ) if filename else None,
                print_sink() if args.print else None ))
    except ( AssertionError, ValueError, SyntaxError, TypeError ) as exc:
        log.warning( "Invalid configuration: %s", exc )
        return 1

    log.normal( "%s", bench )
    try:
        done			= bench.run( cycles=cycles )
    except KeyboardInterrupt:
        log.normal( "Benchmark stopped after %d cycles", bench.cycles )
        return 0
    finally:
        plc.close()

    if not done:
        log.warning( "Benchmark failed: %s", done.failure )
        return 1
    if done.value:
        log.warning( "%d of %d cycles failed data integrity", done.value, bench.cycles )
        return 1
    log.normal( "%d cycles passed data integrity", bench.cycles )
    return 0


if __name__ == "__main__":
    sys.exit( main() )
