# SPDX-License-Identifier: Apache-2.0

"""
Civic issue tracker.

Lifecycle and authorization core for municipal infrastructure complaints,
with thin service adapters around it.
"""

__version__ = "1.0.0"
