# SPDX-License-Identifier: Apache-2.0

"""
Domain logic package for the civic issue tracker.

This package contains the issue lifecycle decision core: the status state
machine, the SLA model, the authorization policy and the lifecycle commands.
All domain functions are pure and testable without external dependencies.
"""
