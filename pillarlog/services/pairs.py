from pillarlog.core.errors import InvalidInput


def canonical_pair(user_a: int, user_b: int) -> tuple[int, int]:
    """
    Order two distinct user ids as (low, high).

    canonical_pair(a, b) == canonical_pair(b, a), so a pair of users always
    lands on the same friendships row whichever of them is acting.
    """
    if user_a == user_b:
        raise InvalidInput("Cannot pair a user with themselves")
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)
