from .exceptions import PPSHError, ModelStructureError, DomainError
from .dual import Dual
from .legendre import schmidt_semi_normalized, legendre_table
from .harmonics import (SphericalHarmonicModel, SphericalHarmonicModels,
                        triangle, coefficient_index, combine, scale,
                        evaluate, gradient, to_local_tangent_plane,
                        gradient_in_local_tangent_plane)
from .igrf import (RE, MagneticModel, field_at_time, field_at_date,
                   read_shc, magnetic_model_from_shc, igrf11)

__version__ = '0.1.0'
