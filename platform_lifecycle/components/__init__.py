# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Hook implementations for the components in the production catalog.

Each module supplies readiness probes and optional hooks for one subsystem
family. The catalog factory in ``platform_lifecycle.registry._catalog`` wires
them into adapters.
"""
