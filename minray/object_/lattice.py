import os
import numpy as np

from numpy import int64
from numpy.typing import NDArray
from typing import Annotated

####

from minray.constant import BC_REFLECTIVE, BC_VACUUM
from minray.object_.base import ObjectBase
from minray.object_.material import MaterialMG
from minray.print_ import print_error

# ======================================================================================
# Lattice
# ======================================================================================


class Lattice(ObjectBase):
    """
    Square lattice of N x N homogeneous cells spanning [0, length) in x and y

    Parameters
    ----------
    materials : list of MaterialMG
        Materials referenced by the material map
    material_map : array_like
        N x N integer indices into `materials`, indexed [iy, ix]; the flattened map
        follows the cell numbering cell_ID = iy * N + ix
    length : float
        Lattice side length [cm]
    x_minus, x_plus, y_minus, y_plus : {"vacuum", "reflective"}
        Boundary condition of each lattice edge
    """

    # Annotations for Numba mode
    label: str = "lattice"
    #
    materials: list[MaterialMG]
    material_map: Annotated[NDArray[int64], ("N", "N")]
    N: int
    G: int
    length: float
    x_minus: str
    x_plus: str
    y_minus: str
    y_plus: str

    def __init__(
        self,
        materials,
        material_map,
        length: float,
        x_minus: str = "reflective",
        x_plus: str = "reflective",
        y_minus: str = "reflective",
        y_plus: str = "reflective",
    ):
        self.materials = list(materials)
        self.material_map = np.asarray(material_map, dtype=int64)
        self.length = length
        self.x_minus = x_minus
        self.x_plus = x_plus
        self.y_minus = y_minus
        self.y_plus = y_plus

        # Material map
        shape = self.material_map.shape
        if len(shape) != 2 or shape[0] != shape[1]:
            print_error(f"Lattice: material map must be square, got shape {shape}")
        self.N = shape[0]
        if self.N == 0:
            print_error("Lattice: material map is empty")
        if len(self.materials) == 0:
            print_error("Lattice: no materials")
        if np.min(self.material_map) < 0 or np.max(self.material_map) >= len(
            self.materials
        ):
            print_error(
                f"Lattice: material indices must be in [0, {len(self.materials)})"
            )

        # Energy groups
        self.G = self.materials[0].G
        for material in self.materials:
            if material.G != self.G:
                print_error(
                    f"Lattice: material {material.name} has {material.G} groups, expected {self.G}"
                )

        if self.length <= 0.0:
            print_error("Lattice: length must be positive")

        # Boundary conditions
        for edge in ["x_minus", "x_plus", "y_minus", "y_plus"]:
            decode_boundary_condition(getattr(self, edge), edge)

    @property
    def N_cell(self):
        return self.N * self.N

    @property
    def cell_width(self):
        return self.length / self.N

    def boundary_conditions(self):
        """Encoded (x-, x+, y-, y+) boundary conditions"""
        return tuple(
            decode_boundary_condition(getattr(self, edge), edge)
            for edge in ["x_minus", "x_plus", "y_minus", "y_plus"]
        )

    @staticmethod
    def material_map_from_file(file_name, N):
        """
        Read an N x N material map written as N * N whitespace-separated integers
        in cell order (row by row, starting at y = 0)
        """
        if not os.path.isfile(file_name):
            print_error(f"Material map file {file_name} not found")
        material_map = np.loadtxt(file_name, dtype=int64).flatten()
        if material_map.size != N * N:
            print_error(
                f"Material map file {file_name} holds {material_map.size} cells, expected {N * N}"
            )
        return material_map.reshape(N, N)

    def __repr__(self):
        text = "\n"
        text += "Lattice\n"
        text += f"  - N: {self.N} x {self.N}\n"
        text += f"  - Length: {self.length} cm\n"
        text += f"  - Materials: {[material.name for material in self.materials]}\n"
        text += f"  - BC (x-, x+, y-, y+): {self.x_minus}, {self.x_plus}, {self.y_minus}, {self.y_plus}\n"
        return text


def decode_boundary_condition(bc, edge=""):
    if bc == "vacuum":
        return BC_VACUUM
    elif bc == "reflective":
        return BC_REFLECTIVE
    print_error(
        f"Lattice: boundary condition of edge {edge} must be 'vacuum' or 'reflective', got '{bc}'"
    )
