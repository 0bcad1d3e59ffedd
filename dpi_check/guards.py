import math

# ======================================================
# ---------------------- GUARDS ------------------------
# ======================================================

def finite(v, fb=0.0):
    """Return float(v) if finite; otherwise fallback."""
    try:
        n = float(v)
        return n if math.isfinite(n) else fb
    except (TypeError, ValueError):
        return fb

def finite_pos(v, fb=None):
    """Finite and strictly positive, else fallback."""
    n = finite(v, None)
    return n if n is not None and n > 0 else fb

def num(v, fb=None):
    """Finite float or fb (used where None has semantic meaning)."""
    return finite(v, fb)

def round_half_up(v):
    # half-up like most other runtimes; builtin round() is banker's rounding
    return int(math.floor(v + 0.5))
