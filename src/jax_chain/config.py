"""Package-wide numeric settings."""

# Default tolerance for every epsilon comparison in the package.
EPSILON = 1e-6
