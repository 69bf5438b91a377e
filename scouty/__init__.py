"""Scouty wallet scanner.

Scores the risk of Solana wallet addresses from on-chain observables and
keeps a history of scans.
"""

__version__ = "0.1.0"
__author__ = "Scouty Team"
__email__ = "dev@scouty.app"
