"""retefuente: Colombian payroll withholding calculator (Procedure 1 vs 2)."""

__version__ = "0.1.0"

from retefuente.analytics.simulation import YearSimulation as YearSimulation
from retefuente.analytics.simulation import simulate_year as simulate_year
from retefuente.config.defaults import default_constants as default_constants
from retefuente.config.defaults import demo_inputs as demo_inputs
from retefuente.config.defaults import load_constants as load_constants
from retefuente.config.defaults import load_constants_file as load_constants_file
from retefuente.config.schema import DeductionLimits as DeductionLimits
from retefuente.config.schema import SocialSecurityRules as SocialSecurityRules
from retefuente.config.schema import TaxBracket as TaxBracket
from retefuente.config.schema import TaxConstants as TaxConstants
from retefuente.config.schema import TaxInputs as TaxInputs
from retefuente.core.base import IntermediateCalc as IntermediateCalc
from retefuente.core.base import compute_base as compute_base
from retefuente.core.engine import ComparisonResult as ComparisonResult
from retefuente.core.engine import TaxDetails as TaxDetails
from retefuente.core.engine import TaxResult as TaxResult
from retefuente.core.engine import calculate_tax as calculate_tax
from retefuente.core.engine import compare_procedures as compare_procedures
