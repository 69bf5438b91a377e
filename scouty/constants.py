"""Constants used throughout the Scouty wallet scanner."""

# SPL Token program (fungible token accounts)
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

LAMPORTS_PER_SOL = 1_000_000_000

SECONDS_PER_DAY = 86_400

# getSignaturesForAddress returns at most this many entries per call
MAX_SIGNATURES_PER_REQUEST = 1000
