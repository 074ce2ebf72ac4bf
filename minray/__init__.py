# ======================================================================================
# Simulation building blocks
# ======================================================================================

# Configuration first: it selects the Numba mode before any kernel is defined
import minray.config

# The objects
from minray.object_.lattice import Lattice
from minray.object_.material import MaterialMG
from minray.object_.settings import Settings
from minray.object_.simulation import Simulation

# ======================================================================================
# Runners
# ======================================================================================

from minray.main import run, visualize
