"""
Confirmation token generation.

Tokens are 25 characters drawn uniformly from [A-Za-z0-9], embedded in
the confirmation link and used as the primary key of the token table.
"""

import random
import secrets
import string

TOKEN_LENGTH = 25
TOKEN_ALPHABET = string.ascii_letters + string.digits


def generate_subscription_token(rng: random.Random | None = None) -> str:
    """
    Generate a confirmation token.

    Args:
        rng: Optional random source; tests pass a seeded random.Random.
             Defaults to the secrets module.
    """
    choice = rng.choice if rng is not None else secrets.choice
    return "".join(choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def is_well_formed_token(token: str) -> bool:
    """Check length and alphabet without touching the store."""
    return len(token) == TOKEN_LENGTH and all(c in TOKEN_ALPHABET for c in token)
