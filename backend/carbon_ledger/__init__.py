"""Carbon Ledger Package — carbon-offset credit token ledger.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
