"""
Beanbot - Source Package

Turns a loosely typed chat message such as
``@KFC hamburger 12.40 AUD cba > food`` into a double-entry ledger record
and appends it to a yearly ledger file kept in a remote repository.

DESIGN PRINCIPLES:
1. Field order in the message does not matter
2. Fail early, fail visibly
3. No silent overwrites of the ledger
4. Every step must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Beanbot Team"
