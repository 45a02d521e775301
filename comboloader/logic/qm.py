"""
Quine-McCluskey minimization over bit-vector implicants.

An implicant is a pair of ints (value, mask): bits set in 'mask' are
don't-cares, and 'value' never has a bit set under the mask. A minterm is
an implicant with an empty mask.
"""

__all__ = [
    "MAX_VARIABLES",
    "expand_minterms",
    "reduce_to_prime_implicants",
    "reduce_prime_implicants_to_subset",
    "remove_redundant",
    "minimize",
]


import logging

from ..errors import CapacityError


logger = logging.getLogger(__name__)

MAX_VARIABLES = 31


def covers(implicant, minterm):
    value, mask = implicant
    return minterm & ~mask == value


def expand_minterms(implicants):
    """Replaces each implicant with the sorted minterms it covers."""
    minterms = set()
    for value, mask in implicants:
        sub = mask
        while True:
            minterms.add(value | sub)
            if not sub:
                break
            sub = (sub - 1) & mask
    return sorted(minterms)


def reduce_to_prime_implicants(minterms):
    current = [(minterm, 0) for minterm in minterms]
    primes = []

    while current:
        # All implicants of a pass share the number of don't-cares.
        buckets = {}
        for implicant in current:
            ones = bin(implicant[0]).count('1')
            buckets.setdefault(ones, []).append(implicant)

        combined = {}  # ordered set
        used = set()
        for ones in sorted(buckets):
            for a_value, a_mask in buckets[ones]:
                for b_value, b_mask in buckets.get(ones + 1, ()):
                    if a_mask != b_mask:
                        continue
                    diff = a_value ^ b_value
                    if diff & (diff - 1):
                        continue
                    combined[(a_value, a_mask | diff)] = None
                    used.add((a_value, a_mask))
                    used.add((b_value, b_mask))

        primes.extend(implicant for implicant in current
                      if implicant not in used)
        current = list(combined)

    return primes


def reduce_prime_implicants_to_subset(primes, minterms):
    """
    Greedy cover: essential implicants first, then whichever implicant
    covers the most remaining minterms. Ties go to the earliest implicant,
    so the chosen cover is deterministic though not always minimum.
    """
    candidates = list(primes)
    remaining = list(minterms)
    result = []

    while remaining:
        chosen = None

        for minterm in remaining:
            covering = [p for p in candidates if covers(p, minterm)]
            if len(covering) == 1:
                chosen, = covering
                break

        if chosen is None:
            best_count = 0
            for implicant in candidates:
                count = sum(1 for m in remaining if covers(implicant, m))
                if count > best_count:
                    chosen, best_count = implicant, count

        if chosen is None:
            raise ValueError('Minterms not covered by any prime implicant')

        result.append(chosen)
        candidates.remove(chosen)
        remaining = [m for m in remaining if not covers(chosen, m)]

    return result


def remove_redundant(cover, minterms):
    """Drops implicants the rest of the cover makes unnecessary, last first."""
    cover = list(cover)
    for implicant in reversed(list(cover)):
        rest = [i for i in cover if i != implicant]
        if all(any(covers(i, m) for i in rest) for m in minterms):
            cover = rest
    return cover


def minimize(implicants, nr_variables):
    """
    Returns a list of implicants covering exactly the same minterms as the
    given ones. An empty list stands for constant false, a single implicant
    with a full mask for constant true.

    Implicants that already form an irredundant cover by prime implicants
    are returned as is, so minimizing a minimized function is a no-op.
    """
    if nr_variables > MAX_VARIABLES:
        raise CapacityError('Too many variables to minimize: %d (at most %d '
                            'are supported)', nr_variables, MAX_VARIABLES)

    implicants = list(dict.fromkeys(implicants))
    minterms = expand_minterms(implicants)
    logger.debug('minimizing %d implicants: %d variables, %d minterms',
                 len(implicants), nr_variables, len(minterms))

    full_mask = (1 << nr_variables) - 1
    if len(minterms) == 1 << nr_variables:
        return [(0, full_mask)]

    primes = reduce_to_prime_implicants(minterms)
    if set(implicants) <= set(primes) and \
            remove_redundant(implicants, minterms) == implicants:
        return implicants

    cover = reduce_prime_implicants_to_subset(primes, minterms)
    return remove_redundant(cover, minterms)
