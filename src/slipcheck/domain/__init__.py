"""Domain layer for slipcheck application.

Import services from their modules; ``slipcheck.database`` imports
``slipcheck.domain.entities`` and must not pull the services in.
"""
