# Import every model so Base.metadata knows all tables
from . import audit, fire, personnel, safety, treatment, user  # noqa: F401
