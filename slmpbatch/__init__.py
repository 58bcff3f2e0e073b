
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
slmpbatch	-- SLMP PLC batched register access, and access-pattern benchmark/verification
"""

from .version import __version__, __version_info__
from .misc import timer, log_cfg, mutexmethod
from .address import (
    D, X, Y, M, B, SD, UNKNOWN, KINDS, RegisterAddress,
    classify, validate, parse, kind_name, format_address,
)
from .client import (
    PlcFailure, InvalidAddress, SizeMismatch, SessionOpenFailure,
    BatchReadFailure, BatchWriteFailure, outcome, plc_client,
)
from .results import CONTIGUOUS, SCATTERED, VARIANTS, benchmark_result
from .verify import register_group, interleave, verifier
