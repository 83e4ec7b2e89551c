from . import carlson
from . import checks
from . import elliptic
from . import jacobi
from . import precision
from . import validation

from .checks import DomainError, ProviderError
from .elliptic import E, F, K, Pi, ellipke
from .jacobi import am, cd, cn, cs, dc, dn, ds, ellipj, nc, nd, ns, sc, sd, sn

__all__ = [
    "carlson",
    "checks",
    "elliptic",
    "jacobi",
    "precision",
    "validation",
    "DomainError",
    "ProviderError",
    "E",
    "F",
    "K",
    "Pi",
    "ellipke",
    "am",
    "ellipj",
    "sn",
    "cn",
    "dn",
    "cd",
    "sd",
    "nd",
    "dc",
    "nc",
    "sc",
    "ns",
    "ds",
    "cs",
]
