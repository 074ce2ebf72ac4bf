import numpy as np

from numpy import float64
from numpy.typing import NDArray
from typing import Annotated

####

from minray.object_.base import ObjectBase
from minray.print_ import print_1d_array, print_error

# ======================================================================================
# Multigroup material
# ======================================================================================


class MaterialMG(ObjectBase):
    """
    Multigroup macroscopic cross sections of a homogeneous material

    Parameters
    ----------
    total : array_like
        Total cross section Sigma_t [/cm], size G
    scatter : array_like, optional
        Scattering matrix [/cm], size G x G, indexed [g_in, g_out]
    fission : array_like, optional
        Fission cross section Sigma_f [/cm], size G
    nu_fission : array_like, optional
        Fission neutron production nu Sigma_f [/cm], size G
    chi : array_like, optional
        Fission spectrum, size G (normalized to unity)
    name : str, optional
    """

    # Annotations for Numba mode
    label: str = "multigroup_material"
    #
    name: str
    G: int
    fissionable: bool
    total: Annotated[NDArray[float64], ("G",)]
    scatter: Annotated[NDArray[float64], ("G", "G")]
    fission: Annotated[NDArray[float64], ("G",)]
    nu_fission: Annotated[NDArray[float64], ("G",)]
    chi: Annotated[NDArray[float64], ("G",)]

    def __init__(
        self,
        total,
        scatter=None,
        fission=None,
        nu_fission=None,
        chi=None,
        name: str = "",
    ):
        total = np.atleast_1d(np.asarray(total, dtype=float64))
        G = len(total)
        self.G = G
        self.name = name

        # Allocate the attributes
        self.total = total
        self.scatter = np.zeros([G, G])
        self.fission = np.zeros(G)
        self.nu_fission = np.zeros(G)
        self.chi = np.zeros(G)

        if scatter is not None:
            scatter = np.asarray(scatter, dtype=float64)
            if scatter.size == G * G:
                scatter = scatter.reshape(G, G)
            if scatter.shape != (G, G):
                print_error(f"MaterialMG {name}: scatter must be {G} x {G}")
            self.scatter = scatter
        if fission is not None:
            self.fission = _group_vector(fission, G, "fission", name)
        if nu_fission is not None:
            self.nu_fission = _group_vector(nu_fission, G, "nu_fission", name)

        if np.any(self.total < 0.0) or np.any(self.scatter < 0.0):
            print_error(f"MaterialMG {name}: cross sections must be non-negative")

        # Fission spectrum
        self.fissionable = bool(np.any(self.nu_fission > 0.0))
        if chi is not None:
            self.chi = _group_vector(chi, G, "chi", name)
        elif self.fissionable:
            if G == 1:
                self.chi = np.ones(1)
            else:
                print_error(f"MaterialMG {name}: need to supply chi if G > 1")
        if np.sum(self.chi) > 0.0:
            self.chi = self.chi / np.sum(self.chi)

    def __repr__(self):
        text = "\n"
        text += "Multigroup material\n"
        text += f"  - Name: {self.name}\n"
        text += f"  - G: {self.G}\n"
        text += f"  - Fissionable: {self.fissionable}\n"
        text += f"  - Sigma_t {print_1d_array(self.total)}\n"
        text += f"  - Sigma_s {print_1d_array(self.scatter.flatten())}\n"
        text += f"  - Sigma_f {print_1d_array(self.fission)}\n"
        text += f"  - nu Sigma_f {print_1d_array(self.nu_fission)}\n"
        text += f"  - chi {print_1d_array(self.chi)}\n"
        return text


def _group_vector(value, G, tag, name):
    value = np.atleast_1d(np.asarray(value, dtype=float64))
    if value.shape != (G,):
        print_error(f"MaterialMG {name}: {tag} must have size {G}")
    return value
