import argparse
import numba as nb

# ======================================================================================
# Command-line arguments
# ======================================================================================

parser = argparse.ArgumentParser(description="MinRay: 2D random ray transport")
parser.add_argument(
    "--mode",
    type=str,
    help="Run mode",
    choices=["python", "numba", "numba_debug"],
    default="python",
)
parser.add_argument("--N_ray", type=int, help="Number of rays per iteration")
parser.add_argument("--N_inactive", type=int, help="Number of inactive iterations")
parser.add_argument("--N_active", type=int, help="Number of active iterations")
parser.add_argument(
    "--distance_per_ray", type=float, help="Travel distance per ray [cm]"
)
parser.add_argument(
    "--distance_inactive", type=float, help="Dead zone at the start of each ray [cm]"
)
parser.add_argument("--seed", type=int, help="Random number generator seed")
parser.add_argument("--output", type=str, help="Output file name")
parser.add_argument(
    "--progress_bar", default=None, action="store_true", help="Print iteration table"
)
parser.add_argument("--no-progress_bar", dest="progress_bar", action="store_false")
parser.add_argument(
    "--plot", default=False, action="store_true", help="Write a VTK plot file"
)
parser.add_argument(
    "--runtime_output",
    default=False,
    action="store_true",
    help="Write runtimes to a separate file",
)

# Unknown arguments (e.g., those of pytest) are ignored
args, unargs = parser.parse_known_args()

mode = args.mode

# ======================================================================================
# Numba configuration
# ======================================================================================

if mode == "python":
    nb.config.DISABLE_JIT = True
elif mode == "numba":
    nb.config.DISABLE_JIT = False
elif mode == "numba_debug":
    nb.config.DISABLE_JIT = False
    nb.config.DEBUG = False
    nb.config.NUMBA_FULL_TRACEBACKS = True
